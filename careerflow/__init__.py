"""
CareerFlow - AI Career Manager

Keeps a vault of professional experiences and a tracker of job applications,
and uses a generative-language model to:
- parse and enrich career history
- analyze job descriptions and score candidate fit
- draft tailored resumes and cover letters
- answer career questions in a chat

Data is saved locally and, when configured, mirrored to a remote store.
"""

__version__ = "1.0.0"
