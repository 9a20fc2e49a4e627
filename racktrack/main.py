from racktrack.api.app import create_app
from racktrack.config.settings import Settings
from racktrack.logging.logger import Log


def main() -> None:
    """Entry point: load settings -> build app -> serve."""
    settings = Settings()
    Log.configure(settings.log_level)
    app = create_app(settings)
    Log.info(f"Serving on {settings.http_host}:{settings.http_port} ({settings.app_env})")
    app.run(host=settings.http_host, port=settings.http_port, threaded=True)


if __name__ == "__main__":
    main()
