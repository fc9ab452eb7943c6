import os
import tempfile
import streamlit as st
import pandas as pd
import plotly.express as px
import config
from activity import accepted_submissions, contribution_calendar, recent_submissions
from collect import JsonStore
from export_pdf import collect_report_data, generate_pdf_report
from leaderboard import build_leaderboard, dashboard_stats
from process import score_submissions
from utils import utc_now

# Set page config
st.set_page_config(
    page_title="Interview Readiness Dashboard",
    page_icon="📊",
    layout="wide"
)

st.markdown("""
<style>
h1 {
    font-size: 2.8rem !important;
    font-weight: 600 !important;
    margin-bottom: 1rem !important;
}
h3 {
    font-size: 1.8rem !important;
    font-weight: 500 !important;
    margin-bottom: 0.6rem !important;
}
</style>
""", unsafe_allow_html=True)

# Load snapshot written by collect.py
@st.cache_data
def load_data(data_dir):
    store = JsonStore(data_dir)
    return store.users(), store.submissions(), store.problems()

def leaderboard_frame(board):
    rows = []
    for entry in board:
        rows.append({
            "rank": entry.rank,
            "name": entry.full_name,
            "solved": entry.problems_solved,
            "easy": entry.stats.easy,
            "medium": entry.stats.medium,
            "hard": entry.stats.hard,
            "accuracy": entry.accuracy,
            "streak": entry.streak,
            "improvement": entry.improvement,
            "score": entry.score,
        })
    return pd.DataFrame(rows)

def calendar_frame(calendar):
    # one row per month, short months padded to 31 days
    return pd.DataFrame(
        [month.days + [None] * (31 - len(month.days)) for month in calendar.contribution_data],
        index=[month.name for month in calendar.contribution_data],
        columns=list(range(1, 32)),
    )

def pdf_bytes(users, submissions, problems, now):
    board, students = collect_report_data(users, submissions, problems, now)
    with tempfile.TemporaryDirectory() as tmpdirname:
        path = os.path.join(tmpdirname, "report.pdf")
        generate_pdf_report(board, students, now, path)
        with open(path, "rb") as f:
            return f.read()

def main():
    st.title("Interview Readiness Dashboard")

    users, submissions, problems = load_data(config.DATA_DIR)
    now = utc_now()
    board = build_leaderboard(users, submissions, problems, now)

    st.markdown("<h3>Leaderboard</h3>", unsafe_allow_html=True)
    if not board:
        st.info("No ranked users in the snapshot. Run collect.py first.")
        return
    board_df = leaderboard_frame(board)
    st.dataframe(board_df, use_container_width=True, hide_index=True)

    with st.sidebar:
        st.header("Filters")
        names = {entry.uid: entry.full_name for entry in board}
        uid = st.selectbox("Select User:", list(names.keys()), format_func=names.get)
    user_subs = [s for s in submissions if s.uid == uid]

    stats = dashboard_stats(uid, users, submissions, problems, now)
    cols = st.columns(5)
    cols[0].metric("Problems Solved", stats.problems_solved, stats.weekly_change)
    cols[1].metric("Current Streak", stats.current_streak, stats.streak_change)
    cols[2].metric("Max Streak", stats.max_streak)
    cols[3].metric("Global Rank", stats.global_rank, stats.rank_change)
    cols[4].metric("Improvement Rate", f"{stats.improvement_rate}%")

    col1, col2 = st.columns(2)

    with col1:
        st.markdown("<h3>Score Breakdown</h3>", unsafe_allow_html=True)
        report = score_submissions(user_subs, problems, now)
        breakdown = pd.DataFrame([
            {"component": "Difficulty", "points": report.diff_score},
            {"component": "Accuracy", "points": report.accuracy},
            {"component": "Consistency", "points": report.cons_score},
            {"component": "Improvement", "points": report.imp_score},
        ])
        breakdown_fig = px.bar(breakdown, x="component", y="points", title=f"Total score: {report.total}")
        st.plotly_chart(breakdown_fig, use_container_width=True)

    with col2:
        st.markdown("<h3>Difficulty Mix</h3>", unsafe_allow_html=True)
        mix = pd.DataFrame([
            {"difficulty": name, "solved": count}
            for name, count in stats.difficulty_breakdown.items()
        ])
        if mix["solved"].sum() == 0:
            st.info("No solved problems yet")
        else:
            mix_fig = px.pie(mix, names="difficulty", values="solved")
            st.plotly_chart(mix_fig, use_container_width=True)

    st.markdown("<h3>Contributions</h3>", unsafe_allow_html=True)
    calendar = contribution_calendar(user_subs, now)
    heatmap = px.imshow(
        calendar_frame(calendar),
        color_continuous_scale="Greens",
        zmin=0,
        zmax=4,
        labels=dict(x="Day", y="Month", color="Level"),
    )
    st.plotly_chart(heatmap, use_container_width=True)
    st.caption(f"{calendar.total_submissions} submissions in the last year")

    col3, col4 = st.columns(2)
    with col3:
        st.markdown("<h3>Recent Submissions</h3>", unsafe_allow_html=True)
        recent = recent_submissions(user_subs, problems, now, limit=config.RECENT_LIMIT)
        st.dataframe(pd.DataFrame([r.model_dump() for r in recent]), use_container_width=True, hide_index=True)
    with col4:
        st.markdown("<h3>Latest Accepted</h3>", unsafe_allow_html=True)
        accepted = accepted_submissions(user_subs, problems, now, limit=config.RECENT_LIMIT)
        st.dataframe(pd.DataFrame([a.model_dump() for a in accepted]), use_container_width=True, hide_index=True)

    st.markdown("<h3>Export</h3>", unsafe_allow_html=True)
    st.download_button(
        label="Download PDF Report",
        data=pdf_bytes(users, submissions, problems, now),
        file_name=f"readiness_report_{now.strftime('%d%m%Y')}.pdf",
        mime="application/pdf"
    )

if __name__ == "__main__":
    main()
