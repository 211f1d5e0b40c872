"""Insert a handful of sample study tasks into an empty database.

    python -m studybuddy.db.seed
"""

import logging
from datetime import timedelta

from sqlmodel import Session, select

from ..core.config import settings
from ..core.logging_setup import setup_logging
from ..core.timeutils import utc_now
from .crud import create_task
from .models import Priority, Status, Task
from .session import init_db, make_engine

logger = logging.getLogger(__name__)

SAMPLE_TASKS = [
    # (title, description, days from now, priority, estimate, status)
    ("Ôn tập Toán cao cấp", "Chương 3: Tích phân bội", 2, Priority.high, 120, Status.todo),
    ("Làm bài tập Vật lý", "Bài 1-10 trang 45", 1, Priority.medium, 90, Status.doing),
    ("Đọc sách Lịch sử", None, 5, Priority.low, 60, Status.todo),
    ("Chuẩn bị thuyết trình Tiếng Anh", "Chủ đề: Biến đổi khí hậu", 3, Priority.high, 150, Status.todo),
    ("Nộp báo cáo thí nghiệm Hóa", None, -1, Priority.medium, 45, Status.done),
]

def seed_tasks(session: Session) -> int:
    if session.exec(select(Task)).first() is not None:
        logger.info("Tasks already present, skipping seed")
        return 0
    now = utc_now()
    for title, description, days, priority, estimate, status in SAMPLE_TASKS:
        create_task(session, Task(
            title=title,
            description=description,
            deadline=now + timedelta(days=days),
            priority=priority,
            estimate_minutes=estimate,
            status=status,
        ))
    logger.info("Seeded %d sample tasks", len(SAMPLE_TASKS))
    return len(SAMPLE_TASKS)

if __name__ == "__main__":
    setup_logging()
    engine = make_engine(settings.DATABASE_URL)
    init_db(engine)
    with Session(engine) as session:
        seed_tasks(session)
