"""Core logic for the Game Data Explorer.

The Gradio UI lives in `app.py`. This package contains pure functions that:
- normalize loosely structured JSON datasets into records
- resolve dot-path fields and infer map coordinates
- classify record sections (stats, blueprints, drop locations)
- detect quests and their prerequisites
- filter and paginate record lists
"""
