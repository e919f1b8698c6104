"""
Streamlit UI for the Interview Answer Grader.

A practice interface for:
- Entering an interview question and a written answer
- Grading the answer against the five-axis rubric
- Reviewing feedback, a polished answer and likely follow-up questions
"""
import streamlit as st
import sys
import json
from pathlib import Path
import logging

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import GENERATION_PROVIDER, GradingConfig
from answer_grader.models import SUB_SCORE_AXES
from answer_grader.feedback import format_pitfall
from answer_grader.pipeline import create_grading_pipeline, GradingResult
from answer_grader.session import summarize_session

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Page configuration
st.set_page_config(
    page_title="Interview Answer Grader",
    page_icon="🎤",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: 700;
        color: #1E3A5F;
        margin-bottom: 0.5rem;
    }
    .sub-header {
        font-size: 1.1rem;
        color: #666;
        margin-bottom: 2rem;
    }
</style>
""", unsafe_allow_html=True)

AXIS_LABELS = {
    "structure": "Structure",
    "specificity": "Specificity",
    "logic": "Logic",
    "tech_depth": "Technical depth",
    "risk": "Risk awareness",
}


def init_session_state():
    """Initialize session state variables."""
    if 'last_result' not in st.session_state:
        st.session_state.last_result = None
    if 'history' not in st.session_state:
        st.session_state.history = []


@st.cache_resource
def load_pipeline(provider: str):
    """Build the grading pipeline once per provider (cached)."""
    return create_grading_pipeline(provider=provider)


def display_bullets(title: str, items):
    if items:
        st.markdown(f"**{title}**")
        for item in items:
            st.markdown(f"- {item}")


def display_result(result: GradingResult):
    """Display one graded answer."""
    evaluation = result.evaluation

    if not result.ok:
        st.warning(result.feedback_text)
        return

    col1, col2, col3 = st.columns(3)
    col1.metric("Overall score", f"{evaluation.overall_score}/100")
    col2.metric("Grade", evaluation.grade)
    col3.metric("Category", evaluation.category)

    st.markdown("### 📊 Rubric")
    for axis in SUB_SCORE_AXES:
        st.progress(
            evaluation.chart[axis] / 100,
            text=f"{AXIS_LABELS[axis]}: {evaluation.sub_scores[axis]}/10"
        )

    summary = evaluation.summary_interviewer or evaluation.summary_coach
    if summary:
        st.info(summary)
    if evaluation.summary_interviewer and evaluation.summary_coach:
        st.markdown(f"**Coach:** {evaluation.summary_coach}")

    if evaluation.keywords:
        st.markdown("**Keywords:** " + ", ".join(evaluation.keywords))

    col1, col2 = st.columns(2)
    with col1:
        display_bullets("✅ Strengths", evaluation.strengths)
        display_bullets("➕ What to add", evaluation.adds)
        display_bullets("🎯 Next steps", evaluation.next)
    with col2:
        display_bullets("⚠️ Gaps", evaluation.gaps)
        display_bullets("🚩 Pitfalls", [format_pitfall(p) for p in evaluation.pitfalls])
        display_bullets("🔗 Logic flaws", evaluation.logic_flaws)
        display_bullets("🔍 Missing details", evaluation.missing_details)
        display_bullets("🛡️ Risk points", evaluation.risk_points)

    if evaluation.improvements:
        with st.expander("✏️ Suggested rewrites", expanded=False):
            for improvement in evaluation.improvements:
                st.markdown(f"**Before:** {improvement.before}")
                st.markdown(f"**After:** {improvement.after}")
                if improvement.reason:
                    st.caption(improvement.reason)
                st.markdown("---")

    if evaluation.polished_answer:
        with st.expander("🌟 Polished answer", expanded=False):
            st.markdown(evaluation.polished_answer)

    if evaluation.follow_up_questions:
        with st.expander("❓ Likely follow-up questions", expanded=True):
            for follow_up in evaluation.follow_up_questions:
                st.markdown(f"- **{follow_up.question}**")
                if follow_up.reason:
                    st.caption(follow_up.reason)

    st.download_button(
        label="📥 Download Evaluation (JSON)",
        data=json.dumps(result.to_dict(), indent=2, ensure_ascii=False),
        file_name="interview_evaluation.json",
        mime="application/json"
    )


def display_session_sidebar():
    """Running summary of the answers graded in this browser session."""
    history = st.session_state.history
    if not history:
        return

    summary = summarize_session(history)
    st.markdown("### 🧾 This Session")
    if summary.avg_score is not None:
        st.metric("Average score", f"{summary.avg_score}/100", help=f"Level {summary.level}")
    st.caption(f"{summary.answered} of {summary.total} answers graded")
    for category in summary.by_category:
        st.markdown(f"- {category.category}: {category.avg_score} ({category.count})")


def main():
    """Main application entry point."""
    init_session_state()

    st.markdown('<p class="main-header">🎤 Interview Answer Grader</p>',
                unsafe_allow_html=True)
    st.markdown(
        '<p class="sub-header">Practice an interview answer and get structured feedback</p>',
        unsafe_allow_html=True
    )

    with st.sidebar:
        st.markdown("### ⚙️ Configuration")
        provider = st.selectbox(
            "Generation provider",
            ["openai", "ollama"],
            index=0 if GENERATION_PROVIDER != "ollama" else 1
        )
        pipeline = load_pipeline(provider)
        st.caption(f"Model: {getattr(pipeline.client, 'model', 'unknown')}")

        st.divider()
        display_session_sidebar()

        st.divider()
        if st.button("🔄 Reset Session", type="secondary"):
            for key in ['last_result', 'history']:
                if key in st.session_state:
                    del st.session_state[key]
            st.rerun()

    with st.form("answer_form"):
        col1, col2 = st.columns(2)
        company = col1.text_input("Company (optional)")
        job_title = col2.text_input("Role / position (optional)")
        question = st.text_area("Interview question", height=80)
        answer = st.text_area(
            "Your answer",
            height=260,
            help=f"Up to {GradingConfig.MAX_ANSWER_CHARS} characters"
        )
        submitted = st.form_submit_button("🚀 Grade Answer", type="primary", use_container_width=True)

    if submitted:
        if not question.strip() or not answer.strip():
            st.error("Please enter both a question and an answer.")
        elif len(answer) > GradingConfig.MAX_ANSWER_CHARS:
            st.error(
                f"Answer is too long ({len(answer)} characters, "
                f"limit {GradingConfig.MAX_ANSWER_CHARS})."
            )
        else:
            with st.spinner("Grading answer..."):
                result = pipeline.grade_answer(
                    question, answer,
                    company=company or None,
                    job_title=job_title or None
                )
            st.session_state.last_result = result
            st.session_state.history.append(result.evaluation if result.ok else None)
            st.rerun()

    if st.session_state.get('last_result') is not None:
        st.divider()
        display_result(st.session_state.last_result)


if __name__ == "__main__":
    main()
