from .service import CourseStore


def register_plugin(plugin_manager):
    """Register the course store"""
    plugin_manager.register_store("courses", CourseStore)
