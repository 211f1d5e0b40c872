from datetime import datetime, time, timedelta, timezone

import streamlit as st

import api

PRIORITIES = ["low", "medium", "high"]
STATUSES = ["todo", "doing", "done"]
PRIORITY_BADGE = {"high": "🔴", "medium": "🟡", "low": "🟢"}

st.set_page_config(page_title="StudyBuddy", layout="wide")
st.title("StudyBuddy: quản lý nhiệm vụ học tập")

tab_tasks, tab_new, tab_analytics, tab_calendar = st.tabs(
    ["Nhiệm vụ", "Thêm nhiệm vụ", "Phân tích", "Google Calendar"]
)


def _local(iso: str) -> str:
    return api.parse_deadline(iso).astimezone().strftime("%d/%m/%Y %H:%M")


def _task_fields(key: str, task: dict | None = None) -> dict:
    """Title, description, deadline, priority and estimate inputs; call inside a form."""
    task = task or {}
    if task.get("deadline"):
        current = api.parse_deadline(task["deadline"]).astimezone()
    else:
        current = datetime.combine(datetime.now().date() + timedelta(days=1), time(9, 0))
    title = st.text_input("Tiêu đề", value=task.get("title", ""), key=f"{key}-title")
    description = st.text_area("Mô tả", value=task.get("description") or "", key=f"{key}-desc")
    c1, c2 = st.columns(2)
    day = c1.date_input("Hạn chót", value=current.date(), key=f"{key}-day")
    at = c2.time_input("Giờ", value=current.time().replace(second=0, microsecond=0), key=f"{key}-time")
    priority = st.selectbox(
        "Ưu tiên", PRIORITIES, index=PRIORITIES.index(task.get("priority", "medium")), key=f"{key}-priority"
    )
    estimate = st.number_input(
        "Thời gian ước tính (phút)", min_value=1, value=int(task.get("estimateMinutes", 60)), step=15,
        key=f"{key}-estimate",
    )
    deadline = datetime.combine(day, at).astimezone().astimezone(timezone.utc)
    return {
        "title": title,
        "description": description,
        "deadline": deadline.isoformat(),
        "priority": priority,
        "estimateMinutes": int(estimate),
    }


def _run(action, *args, **kwargs):
    """Call the API, showing failures instead of crashing the page."""
    try:
        return action(*args, **kwargs)
    except (api.ApiError, OSError) as e:
        st.error(str(e))
        return None


# --- Tasks ---
with tab_tasks:
    col1, col2 = st.columns(2)
    status_filter = col1.selectbox("Trạng thái", ["", *STATUSES])
    priority_filter = col2.selectbox("Ưu tiên", ["", *PRIORITIES])
    try:
        tasks = api.list_tasks(status_filter or None, priority_filter or None)
    except (api.ApiError, OSError) as e:
        st.error(f"Không thể tải danh sách nhiệm vụ: {e}")
        tasks = []

    st.subheader("Hạn chót sắp tới")
    now = datetime.now(timezone.utc)
    due = api.upcoming_deadlines(tasks, now)
    if not due:
        st.caption("Không có nhiệm vụ sắp đến hạn")
    for t in due:
        overdue = api.parse_deadline(t["deadline"]) < now
        st.write(f"{'⚠️ Quá hạn' if overdue else '⏰'} {t['title']} · {_local(t['deadline'])}")

    st.subheader("Danh sách")
    if not tasks:
        st.info("Chưa có nhiệm vụ nào.")
    for t in tasks:
        with st.expander(f"{PRIORITY_BADGE.get(t['priority'], '')} {t['title']} · hạn {_local(t['deadline'])}"):
            if t.get("description"):
                st.write(t["description"])
            st.caption(f"{t['estimateMinutes']} phút · {t['status']}")
            c1, c2, c3 = st.columns(3)
            new_status = c1.selectbox(
                "Trạng thái", STATUSES, index=STATUSES.index(t["status"]), key=f"status-{t['id']}"
            )
            if new_status != t["status"] and _run(api.update_task, t["id"], {"status": new_status}):
                st.rerun()
            if c2.button("Đồng bộ lịch", key=f"sync-{t['id']}"):
                event_id = _run(api.calendar_sync_task, t["id"])
                if event_id:
                    st.success(f"Event: {event_id}")
            if c3.button("Xóa", key=f"del-{t['id']}"):
                if _run(api.delete_task, t["id"], delete_event=bool(t.get("googleEventId"))):
                    st.rerun()

            with st.form(f"edit-{t['id']}"):
                changes = _task_fields(f"edit-{t['id']}", t)
                if st.form_submit_button("Lưu thay đổi") and _run(api.update_task, t["id"], changes):
                    st.rerun()

    st.subheader("AI Coach")
    if st.button("Gợi ý từ AI", disabled=not tasks):
        with st.spinner("Đang phân tích..."):
            text = _run(api.suggestion, tasks)
            if text:
                st.info(text)


# --- New task ---
with tab_new:
    with st.form("new-task", clear_on_submit=True):
        payload = _task_fields("new")
        if st.form_submit_button("Tạo nhiệm vụ"):
            created = _run(api.create_task, payload)
            if created:
                st.success(f"Đã tạo: {created['title']}")



# --- Analytics ---
with tab_analytics:
    try:
        data = api.analytics()
    except (api.ApiError, OSError) as e:
        st.error(f"Không thể tải dữ liệu phân tích: {e}")
    else:
        m = st.columns(5)
        m[0].metric("Tổng", data["total"])
        m[1].metric("Hoàn thành", data["completed"])
        m[2].metric("Đang chờ", data["pending"])
        m[3].metric("Quá hạn", data["overdue"])
        m[4].metric("Tỉ lệ hoàn thành", f"{data['completionRate']}%")
        st.caption(f"Thời gian trung bình: {data['averageCompletionTime']} phút")
        st.bar_chart({d["date"]: d["completed"] for d in data["weeklyData"]})
        st.bar_chart(data["priorityStats"])


# --- Google Calendar ---
with tab_calendar:
    try:
        connected = api.calendar_status()
    except (api.ApiError, OSError):
        connected = False
    st.write("Đã kết nối" if connected else "Chưa kết nối")

    if not connected:
        if st.button("Lấy URL xác thực"):
            try:
                st.markdown(f"[Mở trang xác thực Google]({api.calendar_auth_url()})")
            except api.ApiError as e:
                st.error(str(e))
        code = st.text_input("Mã xác thực")
        if st.button("Gửi mã") and code:
            try:
                api.calendar_auth_code(code)
                st.success("Đã kết nối Google Calendar")
            except api.ApiError as e:
                st.error(str(e))
    else:
        horizon = st.number_input("Số ngày đồng bộ", min_value=0, max_value=365, value=30)
        if st.button("Đồng bộ ngay"):
            try:
                stats = api.calendar_sync(int(horizon))
                st.success(f"Tạo {stats['created']} · Cập nhật {stats['updated']}")
            except api.ApiError as e:
                st.error(str(e))
