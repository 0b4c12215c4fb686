"""
Course Player - Learner-facing course player

Streamlit application for working through a course: lessons unlock in order,
section quizzes gate the next section, and the certificate view opens once
the course is complete.

Usage:
    streamlit run app.py
"""

import logging

import streamlit as st

from courseplayer.classroom import (
    AuthSession,
    CourseAPI,
    CoursePlayerController,
    PENDING_APPROVAL_NOTICE,
    LessonAvailability,
    PanelLayout,
    QuizState,
    ViewMode,
    get_status_indicator,
)
from courseplayer.utils import load_settings, setup_logging
from courseplayer.viewer import (
    get_quiz_css,
    question_options,
    render_all_feedback,
    render_certificate_banner,
    render_certificate_preview,
    render_completion_summary,
    render_quiz_header,
    render_quiz_result,
)


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

SETTINGS = load_settings()
setup_logging(SETTINGS.log_level)
logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="Course Player",
    page_icon="🎓",
    layout="wide",
    initial_sidebar_state="expanded",
)


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

def init_session_state():
    """Initialize session state variables."""
    if "auth" not in st.session_state:
        st.session_state.auth = AuthSession(SETTINGS.session_path)

    if "player" not in st.session_state:
        api = CourseAPI(SETTINGS.api_url, st.session_state.auth, timeout=SETTINGS.timeout)
        st.session_state.player = CoursePlayerController(api)

    # Layout is its own container; the player never touches it
    if "layout" not in st.session_state:
        st.session_state.layout = PanelLayout()

    if "search_filter" not in st.session_state:
        st.session_state.search_filter = ""

    # Bumped on retake so answer widgets start empty
    if "quiz_attempt" not in st.session_state:
        st.session_state.quiz_attempt = 0

    course_id = st.query_params.get("course")
    player = st.session_state.player
    if course_id and player.course_id != course_id:
        player.load(course_id)


def show_notices():
    """Flush player notices as toasts."""
    icons = {"success": "✅", "info": "ℹ️", "warning": "⚠️", "error": "❌"}
    for notice in st.session_state.player.drain_notices():
        st.toast(notice.message, icon=icons.get(notice.level))


# -----------------------------------------------------------------------------
# Sidebar: Curriculum Tree
# -----------------------------------------------------------------------------

def render_sidebar():
    """Render the sidebar with sign-in, curriculum tree and progress."""
    player = st.session_state.player
    auth = st.session_state.auth

    st.sidebar.title("🎓 Course Player")

    if not auth.is_authenticated:
        token = st.sidebar.text_input("Access token", type="password")
        if st.sidebar.button("Sign in", disabled=not token):
            auth.sign_in(token)
            if player.course_id:
                player.load(player.course_id)
            st.rerun()

    course_id = st.sidebar.text_input("Course ID", value=player.course_id or "")
    if st.sidebar.button("Open course", disabled=not course_id):
        st.query_params["course"] = course_id
        player.load(course_id)
        st.rerun()

    if player.course is None or not player.is_enrolled:
        return

    st.sidebar.divider()
    progress = player.progress
    st.sidebar.markdown(f"**Progress:** {round(progress.overall_progress)}%")
    st.sidebar.progress(progress.overall_progress / 100)

    st.session_state.search_filter = st.sidebar.text_input(
        "Filter sections",
        value=st.session_state.search_filter,
        placeholder="Filter sections",
        label_visibility="collapsed",
    )
    render_curriculum_tree()


def render_curriculum_tree():
    """Render sections, lessons and quizzes with availability."""
    player = st.session_state.player
    tree = player.navigation_tree(st.session_state.search_filter)

    for nav_section in tree:
        section = nav_section.section
        counts = f"({nav_section.completed_count}/{nav_section.total_count})"
        expanded = player.current_section is not None and player.current_section.id == section.id
        with st.sidebar.expander(f"**Section {nav_section.index + 1}: {section.title}** {counts}", expanded=expanded):
            for nav_lesson in nav_section.lessons:
                indicator = get_status_indicator(nav_lesson.availability, nav_lesson.is_current)
                if st.button(
                    f"{indicator} {nav_lesson.lesson.title}",
                    key=f"lesson_{nav_lesson.lesson.id}",
                    disabled=nav_lesson.availability == LessonAvailability.LOCKED,
                    use_container_width=True,
                ):
                    player.select(nav_lesson.target)
                    st.rerun()

            if nav_section.quiz:
                quiz = nav_section.quiz
                indicator = get_status_indicator(quiz.availability, quiz.is_current)
                if st.button(
                    f"{indicator} {quiz.title}",
                    key=f"quiz_{section.id}",
                    disabled=quiz.availability == LessonAvailability.LOCKED,
                    use_container_width=True,
                ):
                    player.select(quiz.target)
                    st.rerun()

    if player.course.final_quiz is not None:
        if st.sidebar.button("🏁 Final Quiz", use_container_width=True):
            player.select_final_quiz()
            st.rerun()

    if player.enrollment.certificate_issued:
        if st.sidebar.button("🏆 View Certificate", use_container_width=True):
            player.show_certificate()
            st.rerun()


# -----------------------------------------------------------------------------
# Main Content
# -----------------------------------------------------------------------------

def render_enroll_view():
    """Call to action for learners not yet enrolled."""
    player = st.session_state.player
    course = player.course

    st.title(course.title)
    st.write(course.description)
    tags = [course.language.upper(), course.difficulty or "", f"{len(course.sections)} sections"]
    st.caption(" · ".join(t for t in tags if t))

    if st.button("Enroll in Course", type="primary", use_container_width=True):
        player.enroll()
        st.rerun()


def render_lesson_view():
    """Render the open lesson with navigation and completion controls."""
    player = st.session_state.player
    lesson = player.current_lesson
    if lesson is None:
        st.info("Select a lesson from the sidebar to begin.")
        return

    section = player.current_section
    pos, total = player.sequencer.get_lesson_position(player.current)
    st.caption(f"{player.course.title} › {section.title} · Lesson {pos} of {total}")
    st.header(lesson.title)
    if lesson.video_url:
        st.video(lesson.video_url)
    st.markdown(lesson.content)

    st.divider()
    col1, col2, col3 = st.columns([1, 2, 1])

    with col1:
        if st.button("← Previous", use_container_width=True, disabled=not player.can_go_previous):
            player.previous()
            st.rerun()

    with col2:
        if player.progress.is_lesson_completed(section.id, lesson.id):
            st.success("Lesson completed!")
        elif st.button(
            "Mark lesson as complete",
            type="primary",
            use_container_width=True,
            disabled=player.completion.in_flight,
        ):
            player.complete_current_lesson()
            st.rerun()

    with col3:
        if st.button("Next →", use_container_width=True):
            player.next()
            st.rerun()


def render_quiz_view():
    """Render quiz questions, or the result after submission."""
    player = st.session_state.player
    flow = player.quiz_flow
    quiz = flow.quiz

    st.markdown(get_quiz_css(), unsafe_allow_html=True)
    st.markdown(render_quiz_header(quiz), unsafe_allow_html=True)

    if flow.shows_result:
        st.markdown(render_quiz_result(flow.result, quiz), unsafe_allow_html=True)
        st.subheader("Question Results")
        st.markdown(render_all_feedback(flow.feedback()), unsafe_allow_html=True)

        if flow.state == QuizState.CONTINUED:
            # end of the course without an issued certificate
            st.success(PENDING_APPROVAL_NOTICE)
            if st.button("← Back to lesson", use_container_width=True):
                player.previous()
                st.rerun()
        elif flow.state == QuizState.PASSED:
            if st.button("Continue", type="primary", use_container_width=True):
                player.continue_after_quiz()
                st.rerun()
        else:
            if flow.retakes_remaining is not None:
                st.caption(f"Retakes remaining: {flow.retakes_remaining}")
            if st.button("Retake Quiz", type="primary", use_container_width=True):
                if player.retake_quiz():
                    st.session_state.quiz_attempt += 1
                st.rerun()
        return

    for idx, question in enumerate(quiz.questions):
        st.markdown(f"**{idx + 1}. {question.text}**  _({question.points} pts)_")
        options = question_options(question)
        current = flow.answers.get(question.id)
        key = f"answer_{quiz.id}_{question.id}_{st.session_state.quiz_attempt}"
        if options:
            choice = st.radio(
                "Answer",
                options,
                index=options.index(current) if current in options else None,
                key=key,
                label_visibility="collapsed",
            )
        else:
            choice = st.text_area("Answer", value=current or "", key=key, label_visibility="collapsed")
        if choice and choice != current:
            player.answer(question.id, choice)

    col1, col2 = st.columns(2)
    with col1:
        if st.button("← Back to lesson", use_container_width=True):
            player.previous()
            st.rerun()
    with col2:
        if st.button(
            "Submit Quiz",
            type="primary",
            use_container_width=True,
            disabled=flow.state == QuizState.SUBMITTING,
        ):
            player.submit_quiz()
            st.rerun()


def render_quiz_unavailable_view():
    player = st.session_state.player
    st.error(f"**Quiz Not Available**\n\n{player.error or 'This quiz could not be loaded.'}")
    if st.button("Go Back"):
        player.previous()
        st.rerun()


def render_certificate_view():
    """Render certificate status, summary and (when approved) actions."""
    player = st.session_state.player
    view = player.certificate_view
    if view is None:
        st.info("Loading certificate...")
        return

    st.markdown(render_certificate_banner(view), unsafe_allow_html=True)
    st.markdown(render_completion_summary(view), unsafe_allow_html=True)
    st.markdown(render_certificate_preview(view), unsafe_allow_html=True)

    if view.can_print:
        st.link_button("🖨️ Print Certificate", view.certificate.pdf_url)
    if view.can_share:
        st.code(view.certificate.shareable_url, language=None)


def render_assistant_panel():
    """Placeholder panel showing what the assistant would be scoped to."""
    context = st.session_state.player.assistant_context()
    if context is None:
        return
    st.subheader("AI Assistant")
    if context.disabled:
        st.caption("The assistant is unavailable during quizzes.")
    else:
        st.caption(f"Ask about: {context.title}")


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    init_session_state()
    player = st.session_state.player
    layout = st.session_state.layout

    render_sidebar()

    if player.view_mode == ViewMode.SIGNED_OUT:
        st.error(player.error or "You have been signed out.")
    elif player.course_id is None:
        st.info("Open a course from the sidebar to begin.")
    elif player.view_mode == ViewMode.ERROR:
        st.error(f"**Something went wrong**\n\n{player.error or 'Course not found'}")
    elif player.view_mode == ViewMode.LOADING:
        st.info("Loading course...")
    elif player.view_mode == ViewMode.ENROLL:
        render_enroll_view()
    else:
        _, content_share, assistant_share = layout.column_ratios()
        main_col, assistant_col = st.columns([content_share, assistant_share])
        with main_col:
            if player.view_mode == ViewMode.LESSON:
                render_lesson_view()
            elif player.view_mode == ViewMode.QUIZ:
                render_quiz_view()
            elif player.view_mode == ViewMode.QUIZ_UNAVAILABLE:
                render_quiz_unavailable_view()
            elif player.view_mode == ViewMode.CERTIFICATE:
                render_certificate_view()
        with assistant_col:
            if st.button("⇔", key="toggle_assistant", help="Minimize/expand AI panel"):
                layout.toggle("assistant")
                st.rerun()
            if not layout.assistant.minimized:
                render_assistant_panel()

    show_notices()


if __name__ == "__main__":
    main()
