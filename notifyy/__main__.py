import os

from dotenv import load_dotenv

from notifyy.cli.commands import app

# Precedence: existing env vars > .env file (override=False)
load_dotenv(os.path.join(os.getcwd(), ".env"), override=False)

if __name__ == "__main__":
    app()
