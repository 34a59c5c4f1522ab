from .service import StudySessionStore


def register_plugin(plugin_manager):
    """Register the study session store"""
    plugin_manager.register_store("study_sessions", StudySessionStore)
