"""
Streamlit user interface for CareerFlow.

Run with: streamlit run careerflow/ui/app.py
"""
