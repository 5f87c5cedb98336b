import os

# Offline LLM, unlimited requests and in-memory stores for every test run.
os.environ.setdefault("TOOLS_LLM_ENABLED", "0")
os.environ.setdefault("TOOLS_STRICT_LLM", "0")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("ASSESSMENT_STORE_BACKEND", "memory")
