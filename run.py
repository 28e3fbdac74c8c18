import os

from app import create_app

app = create_app()

if __name__ == "__main__":
    port = int(os.getenv("PORT", 3001))
    app.logger.info(f"Learnly API at http://localhost:{port}/api (health: /api/health)")
    app.run(host="0.0.0.0", port=port)
