import logging

from src.team_tasks.team_tasks import create_app

app = create_app()

if __name__ == "__main__":
    logging.getLogger(__name__).info("starting development server")
    app.run(host="0.0.0.0", port=5000, debug=app.config.get("DEBUG", False))
