"""
Task storage backends (DayTaskRepo implementations).

- task_store.py: local SQLite, one JSON list per date key
- api_client.py: the date-keyed task HTTP API (httpx)
"""
