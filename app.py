from __future__ import annotations

import json

import streamlit as st

from skillalign.ai_client import AIClientError, fetch_role_analysis
from skillalign.catalog import (
    load_company_types,
    load_practice_platforms,
    load_project_suggestions,
    load_quiz_banks,
    load_roles,
    load_simulation_actions,
    match_role,
    role_lookup,
)
from skillalign.logging_config import setup_logging
from skillalign.matching import slugify
from skillalign.models import MAX_LEVEL, REQUIREMENT_LABELS, Role, UserSkill, level_label
from skillalign.quiz import QuizSession, questions_for_skill
from skillalign.radar import project_radar, radar_axes
from skillalign.recommendations import build_enhancement_plan, build_practice_links, build_training_links
from skillalign.report import comparison_frame, export_payload, radar_frame
from skillalign.requirements import parse_role_analysis, requirements_from_analysis
from skillalign.scoring import (
    alignment_band,
    calculate_alignment,
    classify_requirements,
    derive_profile,
    domain_stats,
    gap_counts,
    rank_roles,
    vault_stats,
)
from skillalign.session import SkillSession
from skillalign.simulator import actions_for_role, simulate

APP_TITLE = "SkillAlign"
APP_SUBTITLE = "See how your skills line up with the role you want"
RADAR_RADIUS = 140.0


def ensure_state():
    if "session" not in st.session_state:
        st.session_state["session"] = SkillSession()
    if "quiz" not in st.session_state:
        st.session_state["quiz"] = None
    if "active_actions" not in st.session_state:
        st.session_state["active_actions"] = set()
    if "ai_role" not in st.session_state:
        st.session_state["ai_role"] = None


def inject_styles():
    st.markdown(
        """
        <style>
        .hero-wrap {
            background: radial-gradient(circle at 20% 20%, #6366f1 0%, #4338ca 35%, #0f172a 100%);
            border-radius: 18px;
            padding: 24px;
            color: #f8fafc;
            margin-bottom: 18px;
        }
        .hero-title { font-size: 2rem; font-weight: 700; margin-bottom: 0.3rem; }
        .hero-sub { opacity: 0.9; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def render_radar(chart) -> None:
    if not chart.points:
        st.caption("No skills to chart.")
        return
    span = chart.radius * 1.4
    cx, cy = chart.center
    st.vega_lite_chart(
        radar_frame(chart),
        {
            "encoding": {
                "x": {"field": "x", "type": "quantitative", "axis": None,
                      "scale": {"domain": [cx - span, cx + span]}},
                "y": {"field": "y", "type": "quantitative", "axis": None,
                      "scale": {"domain": [-cy - span, -cy + span]}},
            },
            "layer": [
                {
                    "transform": [{"filter": "datum.kind != 'label'"}],
                    "mark": {"type": "line"},
                    "encoding": {
                        "order": {"field": "order"},
                        "detail": {"field": "series"},
                        "color": {"field": "kind", "type": "nominal", "legend": None,
                                  "scale": {"domain": ["grid", "skill"], "range": ["#cbd5e1", "#4338ca"]}},
                    },
                },
                {
                    "transform": [{"filter": "datum.kind == 'label'"}],
                    "mark": {"type": "text", "fontSize": 11},
                    "encoding": {"text": {"field": "text"}},
                },
            ],
        },
        use_container_width=True,
    )


def render_selection(session: SkillSession, roles: list[Role], companies) -> None:
    state = session.snapshot()
    company_ids = [c.id for c in companies]
    role_ids = [r.id for r in roles]
    c1, c2 = st.columns(2)
    company = c1.selectbox(
        "Company type",
        company_ids,
        index=company_ids.index(state.selected_company) if state.selected_company in company_ids else 0,
        format_func=lambda cid: next(c.name for c in companies if c.id == cid),
    )
    role_id = c2.selectbox(
        "Target role",
        role_ids,
        index=role_ids.index(state.selected_role) if state.selected_role in role_ids else 0,
        format_func=lambda rid: next(r.name for r in roles if r.id == rid),
    )
    if company != state.selected_company:
        session.select_company(company)
    if role_id != state.selected_role:
        session.select_role(role_id)
        st.session_state["active_actions"] = set()
    ranked = rank_roles(state.user_skills, roles, state.user_domains)
    if ranked and ranked[0][1] > 0:
        best_id, best_score = ranked[0]
        st.caption(f"Closest fit right now: {next(r.name for r in roles if r.id == best_id)} ({best_score}%)")


def render_quiz(session: SkillSession) -> None:
    active = st.session_state["quiz"]
    if active is None:
        return
    quiz: QuizSession = active["quiz"]
    st.markdown(f"#### Skill check: {active['skill_name']}")
    if not quiz.complete:
        question = quiz.current_question
        st.write(f"Question {quiz.current_index + 1} of {len(quiz.questions)}")
        st.write(question.text)
        choice = st.radio(
            "Answer",
            list(range(len(question.options))),
            format_func=lambda i: question.options[i],
            key=f"quiz_{active['domain_id']}_{active['skill_id']}_{question.id}",
        )
        a, b = st.columns(2)
        if a.button("Submit answer"):
            st.session_state["quiz"] = {**active, "quiz": quiz.answer(choice)}
            st.rerun()
        if b.button("Skip remaining"):
            st.session_state["quiz"] = {**active, "quiz": quiz.skip()}
            st.rerun()
        return

    session.record_quiz(active["domain_id"], active["skill_id"], quiz.level)
    st.success(
        f"Score {quiz.score}/{len(quiz.questions)}. Level set to {level_label(quiz.level)}."
    )
    st.session_state["quiz"] = None


def render_profile(session: SkillSession) -> None:
    state = session.snapshot()
    if not state.user_skills:
        st.caption("No skills in your profile yet. Add one below, load demo data or sync from the vault.")
    for skill in state.user_skills:
        left, mid, right = st.columns([2, 3, 1])
        left.write(f"{skill.name} ({skill.category})")
        level = mid.select_slider(
            "Level",
            options=list(range(MAX_LEVEL + 1)),
            value=skill.level,
            format_func=level_label,
            key=f"level_{skill.skill_id}_{skill.level}",
            label_visibility="collapsed",
        )
        if level != skill.level:
            session.update_skill(skill.skill_id, level)
        if right.button("Remove", key=f"remove_{skill.skill_id}"):
            session.remove_skill(skill.skill_id)
            st.rerun()

    c1, c2, c3, c4 = st.columns([3, 2, 2, 1])
    name = c1.text_input("Skill name", key="new_skill_name")
    level = c2.select_slider("Level", options=list(range(MAX_LEVEL + 1)), value=1,
                             format_func=level_label, key="new_skill_level")
    category = c3.selectbox("Category", ["technical", "dsa", "tools", "soft"], key="new_skill_category")
    if c4.button("Add skill") and name.strip():
        session.add_skill(UserSkill(slugify(name), name.strip(), level, category))
        st.rerun()


def render_vault(session: SkillSession, banks: dict) -> None:
    state = session.snapshot()
    stats = vault_stats(state.user_domains)
    c1, c2, c3 = st.columns(3)
    c1.metric("Skills tracked", stats.total)
    c2.metric("Skills assessed", stats.learned)
    c3.metric("Average level", f"{stats.average_level:.1f}")

    for domain in state.user_domains:
        learned = domain_stats(domain).learned
        with st.expander(f"{domain.name} ({learned}/{len(domain.skills)}) - {domain.description}"):
            for item in domain.skills:
                left, mid, right = st.columns([3, 1, 1])
                left.write(f"{item.name}: **{level_label(item.level)}**")
                if right.button("Remove", key=f"drop_{domain.id}_{item.id}"):
                    session.remove_vault_skill(domain.id, item.id)
                    st.rerun()
                if mid.button("Test level", key=f"test_{domain.id}_{item.id}"):
                    st.session_state["quiz"] = {
                        "domain_id": domain.id,
                        "skill_id": item.id,
                        "skill_name": item.name,
                        "quiz": QuizSession.start(questions_for_skill(item.id, banks)),
                    }
                    st.rerun()
            new_name = st.text_input("Add a custom skill", key=f"custom_{domain.id}")
            if st.button("Add", key=f"add_{domain.id}"):
                session.add_custom_skill(domain.id, new_name)
                st.rerun()
    if st.button("Sync assessed skills into profile"):
        session.sync_vault()
        st.success("Profile updated from the skill vault.")


def render_dashboard(session: SkillSession, role: Role) -> None:
    state = session.snapshot()
    statuses = classify_requirements(role.required_skills, state.user_skills, state.user_domains)
    score = calculate_alignment(state.user_skills, role.required_skills, state.user_domains)
    counts = gap_counts(statuses)

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Alignment", f"{score}%", alignment_band(score).title())
    c1.progress(score / 100.0)
    c2.metric("Met", counts["met"])
    c3.metric("Partial", counts["partial"])
    c4.metric("Gap", counts["gap"])

    left, right = st.columns(2)
    with left:
        st.markdown("Skill radar")
        axes = radar_axes(role.required_skills, state.user_skills, state.user_domains)
        render_radar(project_radar(axes, RADAR_RADIUS))
    with right:
        st.markdown("Skill vs requirement")
        st.dataframe(comparison_frame(statuses), use_container_width=True, hide_index=True)

    report = export_payload(state, role, statuses, score)
    st.download_button(
        "Download report JSON",
        data=json.dumps(report, indent=2),
        file_name=f"skillalign_{role.id}.json",
        mime="application/json",
    )


def render_simulator(session: SkillSession, role: Role, actions) -> None:
    state = session.snapshot()
    relevant = actions_for_role(actions, role)
    baseline = derive_profile(role.required_skills, state.user_skills, state.user_domains)
    active = set(st.session_state["active_actions"])
    for action in relevant:
        on = st.checkbox(
            f"{action.title} (+{action.level_increase} {action.skill_id}, {action.impact} impact)",
            value=action.id in active,
            key=f"action_{action.id}",
        )
        if on:
            active.add(action.id)
        else:
            active.discard(action.id)
    st.session_state["active_actions"] = active

    result = simulate(baseline, relevant, active, role.required_skills)
    c1, c2, c3 = st.columns(3)
    c1.metric("Current", f"{result.baseline_score}%")
    c2.metric("Projected", f"{result.projected_score}%", f"{result.delta:+d}")
    c3.metric("Actions selected", len(active))


def render_dsa(session: SkillSession, role: Role, platforms) -> None:
    progress = session.snapshot().dsa_progress
    st.progress(progress.required_progress_pct(role.dsa_topics) / 100.0)
    for topic in role.dsa_topics:
        status = progress.status(topic.id)
        left, mid, right = st.columns([3, 1, 1])
        tag = "required" if topic.required else "optional"
        left.write(f"{topic.name} ({topic.difficulty}, {tag}): **{status}**")
        if status == "not-started" and mid.button("Start", key=f"start_{topic.id}"):
            session.start_dsa_topic(topic.id)
            st.rerun()
        if status != "completed" and right.button("Complete", key=f"done_{topic.id}"):
            session.complete_dsa_topic(topic.id)
            st.rerun()
    for link in build_practice_links(platforms):
        st.write(f"- [{link['title']}]({link['url']})")


def render_plan(session: SkillSession, role: Role, projects) -> None:
    state = session.snapshot()
    plan = build_enhancement_plan(role.required_skills, state.user_skills, projects, state.user_domains)
    if not plan["gaps"]:
        st.success("Every requirement is met for this role.")
    for gap in plan["gaps"]:
        st.write(
            f"- **{gap['name']}** ({gap['priority']} priority): level {gap['current_level']} -> "
            f"{gap['required_level']} ({REQUIREMENT_LABELS[gap['required_level']]}). {gap['tip']}"
        )
    for project in plan["projects"]:
        st.write(f"- {project['name']} [{project['difficulty']}, {project['time_estimate']}]: {project['description']}")
    for item in build_training_links([gap["name"] for gap in plan["gaps"]]):
        st.write(f"- [{item['provider']}: {item['title']}]({item['url']})")


def render_ai_analysis(session: SkillSession, roles: list[Role]) -> None:
    st.caption("Live analysis requires GROQ_API_KEY.")
    c1, c2 = st.columns(2)
    company = c1.text_input("Company name")
    role_name = c2.text_input("Role title")
    if st.button("Analyze with AI") and company.strip() and role_name.strip():
        try:
            payload = fetch_role_analysis(company, role_name)
        except AIClientError as exc:
            st.error(str(exc))
            payload = {}
        requirements = requirements_from_analysis(parse_role_analysis(payload))
        fallback = None if requirements else match_role(role_name, roles)
        if requirements:
            st.session_state["ai_role"] = Role(id="ai", name=f"{role_name} @ {company}", required_skills=requirements)
        elif fallback is not None:
            st.info(f"AI analysis unavailable; showing the {fallback.name} catalog requirements instead.")
            st.session_state["ai_role"] = Role(
                id="offline",
                name=f"{role_name} @ {company} (offline estimate)",
                required_skills=fallback.required_skills,
                dsa_topics=fallback.dsa_topics,
            )
        else:
            st.info("No structured requirements came back and no catalog role matches that title.")

    ai_role = st.session_state.get("ai_role")
    if ai_role is not None:
        st.markdown(f"#### {ai_role.name}")
        render_dashboard(session, ai_role)


st.set_page_config(page_title=APP_TITLE, layout="wide")
setup_logging()
inject_styles()
st.markdown(
    f'<div class="hero-wrap"><div class="hero-title">{APP_TITLE}</div>'
    f'<div class="hero-sub">{APP_SUBTITLE}</div></div>',
    unsafe_allow_html=True,
)

roles = load_roles()
roles_by_id = role_lookup(roles)
companies = load_company_types()
actions = load_simulation_actions()
projects = load_project_suggestions()
platforms = load_practice_platforms()
banks = load_quiz_banks()
ensure_state()
session: SkillSession = st.session_state["session"]

with st.sidebar:
    st.markdown("### Session")
    if st.button("Disable demo data" if session.snapshot().demo_mode else "Load demo data"):
        session.toggle_demo_mode()
        st.session_state["active_actions"] = set()
        st.rerun()
    st.download_button(
        "Export profile",
        data=json.dumps(session.to_document(), indent=2),
        file_name="skillalign_profile.json",
        mime="application/json",
    )

render_selection(session, roles, companies)
current_role = roles_by_id[session.snapshot().selected_role]

with st.expander("My Profile", expanded=False):
    render_profile(session)
with st.expander("My Skills", expanded=False):
    render_quiz(session)
    render_vault(session, banks)
with st.expander("Dashboard", expanded=True):
    render_dashboard(session, current_role)
with st.expander("What-If Simulator", expanded=True):
    render_simulator(session, current_role, actions)
with st.expander("DSA Readiness", expanded=False):
    render_dsa(session, current_role, platforms)
with st.expander("Enhancement Plan", expanded=False):
    render_plan(session, current_role, projects)
with st.expander("AI Company Analysis", expanded=False):
    render_ai_analysis(session, roles)
