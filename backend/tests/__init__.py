"""
Exercise Tracker Test Suite

Test Structure:
    tests/
    ├── conftest.py          # Test environment, mock and SQLite fixtures
    ├── factories.py         # Record builders
    └── unit/
        ├── test_interaction_service.py  # Attempt orchestration
        ├── test_topic_progress_service.py  # Topic aggregation
        ├── test_attempt_store.py  # Persistence (SQLite)
        ├── test_ai_collaborators.py  # Code judge and feedback generator
        ├── test_llm_client.py  # LiteLLM wrapper
        ├── test_config.py   # Settings and request models
        └── test_api.py      # HTTP surface

Running Tests:
    pytest backend/tests -v
"""
