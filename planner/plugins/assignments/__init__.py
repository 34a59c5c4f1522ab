from .service import AssignmentStore


def register_plugin(plugin_manager):
    """Register the assignment store"""
    plugin_manager.register_store("assignments", AssignmentStore)
