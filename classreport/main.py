"""
Main entry point for the classreport platform.
"""

import json
import logging
import sys
from typing import Any, Dict, Optional

from .api.rest_api import ClassReportRestAPI
from .core.enums import ReportFormat
from .core.exceptions import ClassReportException, ConfigurationError
from .persistence import ClassRepository, JsonDataFile, StudentRepository
from .services import ClassService, ReportService

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    'host': '127.0.0.1',
    'port': 3005,
    'log_level': 'INFO',
    'data_file': None,
}


def load_config(path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Defaults, then the JSON config file, then explicit overrides."""
    config = dict(DEFAULT_CONFIG)
    if path:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Failed to read config file {path}: {str(e)}")
        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Config file {path} must contain a JSON object")
        config.update(loaded)
    for key, value in (overrides or {}).items():
        if value is not None:
            config[key] = value
    return config


def configure_logging(level: str) -> None:
    numeric_level = logging.getLevelName(str(level).upper())
    if not isinstance(numeric_level, int):
        raise ConfigurationError(f"Unknown log level: {level}")
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


class ClassReportPlatform:
    """Wires repositories, services and the REST API together."""

    def __init__(self, config: Optional[dict] = None):
        self._config = dict(DEFAULT_CONFIG)
        self._config.update(config or {})
        self._data_file: Optional[JsonDataFile] = None

        self._initialize_platform()

    def _initialize_platform(self):
        logger.info("Initializing classreport platform...")

        self._students = StudentRepository()
        self._classes = ClassRepository(self._students)

        data_file = self._config.get('data_file')
        if data_file:
            self._data_file = JsonDataFile(data_file)
            if self._data_file.exists():
                self._data_file.load(self._students, self._classes)
            else:
                logger.info("Data file %s not found, starting empty", data_file)

        self._class_service = ClassService(self._students, self._classes)
        self._report_service = ReportService(self._classes)
        self._rest_api = ClassReportRestAPI(self._class_service, self._report_service)
        logger.info("Platform initialized")

    @property
    def class_service(self) -> ClassService:
        return self._class_service

    @property
    def report_service(self) -> ReportService:
        return self._report_service

    @property
    def app(self):
        return self._rest_api.app

    def save(self) -> None:
        """Write current state to the configured data file, if any."""
        if self._data_file is not None:
            self._data_file.save(self._students, self._classes)

    def render_report(self, class_id: str, format: ReportFormat = ReportFormat.JSON) -> str:
        return self._report_service.generate_report(class_id).render(format)

    def start_rest_server(self):
        """Run the REST server until interrupted."""
        import uvicorn

        host = self._config['host']
        port = int(self._config['port'])
        logger.info("REST server starting on %s:%s", host, port)
        try:
            uvicorn.run(self.app, host=host, port=port, log_level=str(self._config['log_level']).lower())
        finally:
            self.save()


def main(argv=None):
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Class enrollment and performance reporting")
    parser.add_argument("--host", type=str, help="REST server host")
    parser.add_argument("--port", type=int, help="REST server port")
    parser.add_argument("--config", type=str, help="Configuration file path")
    parser.add_argument("--data-file", type=str, help="JSON file holding students and classes")
    parser.add_argument("--log-level", type=str, help="Logging level")
    parser.add_argument("--report", type=str, metavar="CLASS_ID", help="Print the report for a class and exit")
    parser.add_argument("--format", type=str, choices=[f.value for f in ReportFormat],
                        default=ReportFormat.JSON.value, help="Report output format")

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config, {
            'host': args.host,
            'port': args.port,
            'data_file': args.data_file,
            'log_level': args.log_level,
        })
        configure_logging(config['log_level'])
        platform = ClassReportPlatform(config)

        if args.report:
            print(platform.render_report(args.report, ReportFormat(args.format)))
            return 0

        platform.start_rest_server()
    except ClassReportException as e:
        logger.error("%s", e.message)
        return 1
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
