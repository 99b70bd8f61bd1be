import base64
from datetime import date

import streamlit as st

from pawpal.activity import log_activity
from pawpal.advisor import Advisor
from pawpal.energy import calculate_target_nutrients
from pawpal.ledger import history_rows, log_meal, progress_rows, split_activities, summarize_day
from pawpal.models import ActivityCategory, DogProfile, InvalidInput, WeatherCondition
from pawpal.progress import answer_quiz, award_xp
from pawpal.settings import Settings, configure_logging
from pawpal.store import (
    connect_db,
    find_log,
    init_db,
    load_logs,
    load_profile,
    load_progress,
    open_day,
    save_progress,
    upsert_log,
)

settings = Settings.from_env()
configure_logging(settings)
advisor = Advisor.from_settings(settings)

st.set_page_config(page_title="PawPal", page_icon="🐶", layout="centered")
st.title("🐶 PawPal 狗狗健康日記")

conn = connect_db(settings.db_path)
init_db(conn)
stored_profile = load_profile(conn)

st.sidebar.code(f"DB: {settings.db_path.resolve()}")
page = st.sidebar.radio("頁面", ["Welcome 開始", "Dashboard 今日", "Summary 總結", "History 歷史"])

if page == "Welcome 開始" or "log_date" not in st.session_state:
    st.header("Welcome 開始")
    name = st.text_input("Name 名字", value=stored_profile.name if stored_profile else "")
    breed = st.text_input("Breed 品種", value=stored_profile.breed if stored_profile else "")
    age = st.number_input("Age 年齡 (years)", min_value=0, value=stored_profile.age if stored_profile else 3, step=1)
    weight = st.number_input(
        "Weight 體重 kg", min_value=0.1, value=stored_profile.weight_kg if stored_profile else 10.0, step=0.1
    )
    habits = st.multiselect(
        "Habits 日常活動",
        options=list(ActivityCategory),
        default=sorted(stored_profile.habits, key=list(ActivityCategory).index) if stored_profile else [],
        format_func=lambda c: c.value,
    )
    log_date = st.date_input("Date 日期", value=date.today())
    weather = st.selectbox("Weather 天氣", options=list(WeatherCondition), format_func=lambda w: w.value)

    if st.button("Start 開始記錄"):
        try:
            targets = calculate_target_nutrients(float(weight), int(age), weather, habits)
            profile = DogProfile(name, breed, int(age), float(weight), frozenset(habits), targets)
        except InvalidInput as exc:
            st.error(str(exc))
        else:
            open_day(conn, profile, log_date.isoformat(), weather)
            st.session_state["log_date"] = log_date.isoformat()
            st.success(f"Daily target: {targets.calories} kcal, water {targets.water} ml")
    st.stop()

logs = load_logs(conn)
current = find_log(conn, st.session_state["log_date"])
if current is None:
    st.session_state.pop("log_date", None)
    st.warning("That day is no longer stored. Please start again. 找不到這天的紀錄，請重新開始。")
    st.rerun()
profile = current.profile_snapshot
target = profile.target_nutrients
stats = summarize_day(current)

if page == "Dashboard 今日":
    st.header(f"{profile.name} · {current.date} · {current.weather.value}")
    cols = st.columns(3)
    cols[0].metric("Eaten 攝取", f"{stats.consumed.calories:.0f} kcal")
    cols[1].metric("Burned 消耗", f"{stats.burned} kcal")
    cols[2].metric("Net 淨熱量", f"{stats.net_calories:.0f} / {target.calories} kcal")
    st.progress(min(1.0, stats.water_intake / target.water) if target.water else 0.0, text="Water 水分")

    st.subheader("Meals 餐點")
    for meal in current.meals:
        st.write(f"- {meal.meal_type}: {meal.description} ({meal.nutrients.calories:.0f} kcal)")
    with st.form("meal"):
        meal_type = st.selectbox("Type", ["BREAKFAST", "DINNER", "SNACK"])
        description = st.text_input("Description 描述")
        image = st.file_uploader("Photo 照片", type=["jpg", "jpeg", "png"])
        if st.form_submit_button("Analyze & add 分析並加入"):
            if not description.strip() and image is None:
                st.warning("Describe the food or add a photo. 請輸入描述或上傳照片。")
            else:
                image_bytes = image.getvalue() if image else None
                image_url = f"data:{image.type};base64,{base64.b64encode(image_bytes).decode()}" if image else None
                nutrients = advisor.analyze_food(description, image_bytes)
                upsert_log(conn, current.with_meal(log_meal(meal_type, description, nutrients, image_url=image_url)))
                st.rerun()

    day, night = split_activities(current.activities)
    for label, items in (("Day Activity 白天活動", day), ("Night Activity 夜間活動", night)):
        st.subheader(label)
        for act in items:
            st.write(f"- {act.category.value}: {act.duration_minutes:.0f} min, {act.calories_burned} kcal")
    with st.form("activity"):
        category = st.selectbox("Activity", list(ActivityCategory), format_func=lambda c: c.value)
        minutes = st.slider("Minutes", 0, 180, 30, step=5)
        time_of_day = st.radio("When", ["DAY", "NIGHT"], horizontal=True)
        if st.form_submit_button("Add 加入"):
            record = log_activity(profile.weight_kg, category, minutes, time_of_day=time_of_day)
            upsert_log(conn, current.with_activity(record))
            st.rerun()

if page == "Summary 總結":
    st.header("Daily Summary 今日總結")
    st.dataframe(
        [
            {
                "nutrient": row.nutrient,
                "actual": round(row.actual, 1),
                "target": row.target,
                "unit": row.unit,
                "percent": round(row.percent),
                "status": row.status,
            }
            for row in progress_rows(stats.consumed, target)
        ],
        use_container_width=True,
    )
    if current.ai_advice:
        st.info(current.ai_advice)
    elif st.button("Get advice 取得建議"):
        upsert_log(conn, current.with_advice(advisor.daily_advice(current, target)))
        st.rerun()

    if current.quiz_completed:
        st.caption("Quiz done today 今日測驗已完成")
    else:
        quiz = st.session_state.get("quiz")
        if quiz is None:
            quiz = st.session_state["quiz"] = advisor.daily_quiz(current, target)
        st.subheader(quiz.question)
        choice = st.radio("Options", [o.id for o in quiz.options], format_func=lambda oid: quiz.option(oid).text)
        if st.button("Answer 回答"):
            updated, xp, message = answer_quiz(current, quiz, choice)
            upsert_log(conn, updated)
            save_progress(conn, award_xp(load_progress(conn), xp, log_count=len(logs)))
            st.session_state.pop("quiz", None)
            st.success(f"{message} (+{xp} XP)")

if page == "History 歷史":
    st.header("History 歷史")
    progress = load_progress(conn)
    st.metric(f"Level {progress.level}", f"{progress.xp} XP")
    st.progress((progress.xp % 100) / 100)
    st.write(" ".join(f"{b.icon} {b.name}" for b in progress.badges) or "No badges yet 還沒有徽章")
    st.line_chart([{"date": r.date, "net": r.net_calories, "sodium": r.sodium} for r in history_rows(logs)], x="date")
    if st.button("Long-term advice 長期建議"):
        st.info(advisor.long_term_advice(logs))
