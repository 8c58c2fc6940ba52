"""
Job tracker tab: add postings, move them through the pipeline, score fit and
draft tailored documents.
"""

from typing import List

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from careerflow.ai_processing import (
    LLMError,
    analyze_job_description,
    calculate_fit,
    generate_cover_letter,
    generate_resume,
    validate_resume_ats,
)
from careerflow.models import ApplicationStatus, Job, new_record_id, now_ms
from careerflow.ui.session import mutate, run_async

STATUSES = [status.value for status in ApplicationStatus]


def status_counts(jobs: List[Job]) -> pd.DataFrame:
    """Number of jobs per status, in pipeline order."""
    frame = pd.DataFrame({"status": [job.status.value for job in jobs]})
    counts = frame["status"].value_counts().reindex(STATUSES, fill_value=0)
    return counts.rename_axis("status").reset_index(name="count")


class JobsTab:
    """Job tracker tab component."""

    def __init__(self):
        self.jobs = st.session_state.collections.jobs
        self.experiences = st.session_state.collections.experiences
        self.llm = st.session_state.llm_manager

    def render(self):
        st.markdown("### 💼 Applications")
        st.caption("Track and optimize your job search.")

        self._render_add_job()

        jobs = self.jobs.data
        if not jobs:
            st.info("No jobs tracked yet.")
            return

        self._render_pipeline_chart(jobs)

        industries = ["All", *sorted({job.industry for job in jobs if job.industry})]
        selected = st.selectbox("Industry", industries) if len(industries) > 1 else "All"
        for job in jobs:
            if selected == "All" or job.industry == selected:
                self._render_job(job)

    def _render_add_job(self):
        with st.expander("➕ Add job"):
            url = st.text_input("Job URL (optional)")
            text = st.text_area("Job description", height=160)
            if not st.button("Analyze & add", disabled=not (url or text)):
                return

            with st.spinner("Analyzing job description..."):
                try:
                    analysis = run_async(analyze_job_description(text, url or None, llm=self.llm))
                except LLMError:
                    st.error("Failed to analyze job. Please try again.")
                    return

            new_job = Job(
                id=new_record_id(),
                title="New Opportunity",
                company="Unknown Company",
                url=url or None,
                description=text,
                status=ApplicationStatus.BOOKMARKED,
                structured_data=analysis,
                created_at=now_ms(),
                industry=analysis.industry,
                job_type=analysis.job_type,
            )
            mutate(self.jobs, lambda prev: [new_job, *prev])
            st.rerun()

    def _render_pipeline_chart(self, jobs: List[Job]):
        fig = px.bar(status_counts(jobs), x="status", y="count", title="Pipeline")
        fig.update_layout(height=260, margin=dict(l=10, r=10, t=40, b=10))
        st.plotly_chart(fig, use_container_width=True)

    def _update(self, job_id: str, **changes):
        def apply(prev: List[Job]) -> List[Job]:
            return [
                Job.from_dict({**job.to_dict(), **changes}) if job.id == job_id else job
                for job in prev
            ]
        mutate(self.jobs, apply)

    def _render_job(self, job: Job):
        with st.expander(f"**{job.title}** · {job.company} [{job.status.value}]"):
            col1, col2, col3 = st.columns(3)
            title = col1.text_input("Title", job.title, key=f"title_{job.id}")
            company = col2.text_input("Company", job.company, key=f"company_{job.id}")
            status = col3.selectbox("Status", STATUSES, index=STATUSES.index(job.status.value),
                                    key=f"status_{job.id}")
            if (title, company, status) != (job.title, job.company, job.status.value):
                self._update(job.id, title=title, company=company, status=status)
                st.rerun()

            if job.url:
                st.markdown(f"[Posting]({job.url})")
            if job.structured_data and job.structured_data.summary_bullets:
                st.markdown("\n".join(f"- {bullet}" for bullet in job.structured_data.summary_bullets))

            self._render_fit(job)
            self._render_documents(job)

            if st.button("🗑️ Delete", key=f"delete_job_{job.id}"):
                mutate(self.jobs, lambda prev: [j for j in prev if j.id != job.id])
                st.rerun()

    def _render_fit(self, job: Job):
        if st.button("🎯 Run fit analysis", key=f"fit_{job.id}"):
            with st.spinner("Comparing your profile..."):
                try:
                    result = run_async(calculate_fit(self.experiences.data, job.description, llm=self.llm))
                except LLMError:
                    st.error("Analysis failed")
                    return
            self._update(job.id, fitAnalysis=result.to_dict())
            st.rerun()

        fit = job.fit_analysis
        if fit is None:
            return

        gauge = go.Figure(go.Indicator(
            mode="gauge+number",
            value=fit.score,
            gauge={"axis": {"range": [0, 100]}},
        ))
        gauge.update_layout(height=200, margin=dict(l=10, r=10, t=10, b=10))
        st.plotly_chart(gauge, use_container_width=True, key=f"gauge_{job.id}")
        st.markdown(fit.summary)
        col1, col2 = st.columns(2)
        col1.markdown("**Strengths**\n" + "\n".join(f"- {s}" for s in fit.strengths))
        col2.markdown("**Gaps**\n" + "\n".join(f"- {g}" for g in fit.gap_analysis))
        if fit.recommended_actions:
            st.markdown("**Recommended actions**\n" + "\n".join(f"- {a}" for a in fit.recommended_actions))

    def _render_documents(self, job: Job):
        col1, col2 = st.columns(2)
        if col1.button("📄 Generate resume", key=f"resume_{job.id}"):
            with st.spinner("Writing resume..."):
                try:
                    content = run_async(generate_resume(self.experiences.data, job.description, llm=self.llm))
                except LLMError:
                    st.error("Generation failed")
                    return
            self._update(job.id, tailoredResume=content, status=ApplicationStatus.APPLYING.value)
            st.rerun()
        if col2.button("✉️ Generate cover letter", key=f"cover_{job.id}"):
            with st.spinner("Writing cover letter..."):
                try:
                    content = run_async(generate_cover_letter(self.experiences.data, job.description, llm=self.llm))
                except LLMError:
                    st.error("Generation failed")
                    return
            self._update(job.id, tailoredCoverLetter=content)
            st.rerun()

        if job.tailored_resume:
            resume = st.text_area("Resume", job.tailored_resume, height=300, key=f"resume_text_{job.id}")
            if resume != job.tailored_resume:
                self._update(job.id, tailoredResume=resume)
            if st.button("🤖 Check ATS compatibility", key=f"ats_{job.id}"):
                with st.spinner("Checking..."):
                    report = run_async(validate_resume_ats(resume, llm=self.llm))
                st.metric("ATS score", f"{report.score:.0f}")
                for issue in report.issues:
                    st.warning(issue)
                for suggestion in report.suggestions:
                    st.info(suggestion)

        if job.tailored_cover_letter:
            letter = st.text_area("Cover letter", job.tailored_cover_letter, height=300, key=f"cover_text_{job.id}")
            if letter != job.tailored_cover_letter:
                self._update(job.id, tailoredCoverLetter=letter)
