"""
Experience vault tab: create, edit, import, enrich and delete career entries.
"""

import streamlit as st

from careerflow.ai_processing import enrich_experience, parse_career_history, refine_bullet_point
from careerflow.models import Experience, PRESENT, new_record_id
from careerflow.ui.session import mutate, run_async


class VaultTab:
    """Experience vault tab component."""

    def __init__(self):
        self.collection = st.session_state.collections.experiences
        self.llm = st.session_state.llm_manager

    def render(self):
        st.markdown("### 🗂️ Experience Vault")
        st.caption("Your career history, enriched with AI.")

        col1, col2 = st.columns([1, 2])
        with col1:
            if st.button("➕ New experience"):
                self._create_new()
        with col2:
            self._render_import()

        experiences = self.collection.data
        if not experiences:
            st.info("No experiences yet. Add one or import your career history.")
        for exp in experiences:
            self._render_experience(exp)

    def _create_new(self):
        new_exp = Experience(id=new_record_id(), title="New Role", company="Company Name")
        mutate(self.collection, lambda prev: [new_exp, *prev])

    def _render_import(self):
        uploaded = st.file_uploader("Import career history (.txt or .md)", type=["txt", "md"])
        if uploaded is None or not st.button("Import"):
            return

        text = uploaded.getvalue().decode("utf-8", errors="replace")
        with st.spinner("Splitting your history into roles..."):
            parsed = run_async(parse_career_history(text, llm=self.llm))

        if parsed:
            imported = [
                Experience(
                    id=new_record_id(index),
                    title=item.get("title") or "Imported Role",
                    company=item.get("company") or "Unknown",
                    start_date=item.get("startDate") or "",
                    end_date=item.get("endDate") or "",
                    raw_description=item.get("rawDescription") or "",
                )
                for index, item in enumerate(parsed)
            ]
        else:
            imported = [Experience(id=new_record_id(), title="Imported Role", company="Unknown",
                                   raw_description=text)]

        mutate(self.collection, lambda prev: [*imported, *prev])
        st.success(f"Imported {len(imported)} experience(s)")

    def _render_experience(self, exp: Experience):
        end = "Present" if exp.is_current else (exp.end_date or "?")
        with st.expander(f"**{exp.title}** · {exp.company} ({exp.start_date or '?'} - {end})"):
            with st.form(f"exp_form_{exp.id}"):
                title = st.text_input("Title", exp.title)
                company = st.text_input("Company", exp.company)
                col1, col2 = st.columns(2)
                start_date = col1.text_input("Start date", exp.start_date)
                end_date = col2.text_input(f"End date (or '{PRESENT}')", exp.end_date)
                raw_description = st.text_area("Description", exp.raw_description, height=160)
                saved = st.form_submit_button("💾 Save")

            if saved:
                updated = Experience.from_dict({
                    **exp.to_dict(),
                    "title": title,
                    "company": company,
                    "startDate": start_date,
                    "endDate": end_date,
                    "rawDescription": raw_description,
                })
                mutate(self.collection, lambda prev: [updated if e.id == exp.id else e for e in prev])
                st.rerun()

            self._render_enrichment(exp)

            col1, col2 = st.columns(2)
            if col1.button("✨ Enrich with AI", key=f"enrich_{exp.id}", disabled=not exp.raw_description):
                self._enrich(exp)
            if col2.button("🗑️ Delete", key=f"delete_{exp.id}"):
                mutate(self.collection, lambda prev: [e for e in prev if e.id != exp.id])
                st.rerun()

    def _render_enrichment(self, exp: Experience):
        if exp.industry or exp.sector:
            st.markdown(f"**Industry:** {exp.industry or 'N/A'} · **Sector:** {exp.sector or 'N/A'}")
        if exp.about_company:
            st.markdown(f"_{exp.about_company}_")
        if exp.products:
            st.markdown(f"**Products:** {', '.join(exp.products)}")
        if exp.hard_skills or exp.soft_skills:
            st.markdown(f"**Hard skills:** {', '.join(exp.hard_skills or [])}")
            st.markdown(f"**Soft skills:** {', '.join(exp.soft_skills or [])}")

        for index, bullet in enumerate(exp.star_bullets or []):
            col1, col2 = st.columns([6, 1])
            col1.markdown(f"- {bullet}")
            if col2.button("Refine", key=f"refine_{exp.id}_{index}"):
                with st.spinner("Refining..."):
                    refined = run_async(refine_bullet_point(bullet, llm=self.llm))
                bullets = list(exp.star_bullets)
                bullets[index] = refined
                updated = Experience.from_dict({**exp.to_dict(), "starBullets": bullets})
                mutate(self.collection, lambda prev: [updated if e.id == exp.id else e for e in prev])
                st.rerun()

    def _enrich(self, exp: Experience):
        with st.spinner("Analyzing experience..."):
            enrichment = run_async(enrich_experience(exp.raw_description, llm=self.llm))
        if not enrichment:
            st.error("Failed to process with AI")
            return
        updated = exp.apply_enrichment(enrichment)
        mutate(self.collection, lambda prev: [updated if e.id == exp.id else e for e in prev])
        st.rerun()
