import logging
import sys
from typing import Any, Dict, Optional

from .config import Config
from .db import Database, database_url_from_config
from .planner_store import PlannerStore
from .plugin_manager import PluginManager
from .seed import apply_seed, load_seed_file

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'


class PlannerApp:
    def __init__(self, config_path: Optional[str] = None, db_url: Optional[str] = None,
                 watch_config: bool = True):
        self.logger = logging.getLogger(self.__class__.__name__)

        self.config = Config(config_path=config_path, watch=watch_config)
        self.config.register_change_callback(self.handle_config_change)

        self._setup_logging()

        # Plugins first so every model is registered on Base before create_all
        self.plugin_manager = PluginManager()

        self.database = Database(db_url or database_url_from_config(self.config.data))
        self.database.create_all()

        self.store = PlannerStore(self.database, self.plugin_manager.stores)
        self.analytics_settings = self.config.analytics_settings()

        self._load_seed()

    def _setup_logging(self) -> None:
        """Apply the configured level; add a file handler when logging.file is set"""
        logging_config = self.config.get_section("logging")
        root_logger = logging.getLogger()
        level_name = str(logging_config.get("level", "INFO")).upper()
        root_logger.setLevel(getattr(logging, level_name, logging.INFO))

        formatter = logging.Formatter(LOG_FORMAT)

        if not root_logger.handlers:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            root_logger.addHandler(console_handler)

        log_file = logging_config.get("file")
        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

        logging.info("Academic planner starting...")

    def _load_seed(self) -> None:
        seed_path = self.config.data.get("seed")
        if not seed_path:
            return
        if not self.store.is_empty():
            self.logger.debug("Store already has data, skipping seed file")
            return
        apply_seed(self.store, load_seed_file(seed_path))

    def handle_config_change(self, new_config: Dict[str, Any]) -> None:
        """Handle configuration changes"""
        self.logger.info("Handling config change")
        try:
            self.analytics_settings = self.config.analytics_settings()
            level_name = str((new_config.get("logging") or {}).get("level", "INFO")).upper()
            logging.getLogger().setLevel(getattr(logging, level_name, logging.INFO))
        except Exception as e:
            self.logger.error(f"Error handling config change: {e}", exc_info=True)

    def run(self) -> None:
        from planner.api.server import run_api_server

        try:
            run_api_server(self)
        finally:
            self.close()

    def close(self) -> None:
        self.config.cleanup()
        self.database.dispose()
