from .service import GradeStore


def register_plugin(plugin_manager):
    """Register the grade store"""
    plugin_manager.register_store("grades", GradeStore)
