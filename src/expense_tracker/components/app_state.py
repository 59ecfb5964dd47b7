import os

import streamlit as st
from dotenv import load_dotenv

from expense_tracker.dbs.expense_store import JsonFileStore
from expense_tracker.llm.openai_client import OpenAIClient

REQUIRED_ENV = ["OPENAI_API_KEY"]


def check_env():
    load_dotenv()
    missing = [k for k in REQUIRED_ENV if k not in os.environ]
    if missing:
        raise RuntimeError(f"Missing env vars: {missing}")


def get_store() -> JsonFileStore:
    if 'store' not in st.session_state:
        st.session_state['store'] = JsonFileStore()
    return st.session_state['store']


def get_llm_client() -> OpenAIClient:
    if 'llm_client' not in st.session_state:
        st.session_state['llm_client'] = OpenAIClient()
    return st.session_state['llm_client']
