import os

from dotenv import load_dotenv

from handlerchain.cli.commands import app

# Load .env file from ~/.handlerchain/ if it exists
# Precedence: existing env vars > .env file (override=False)
load_dotenv(os.path.expanduser("~/.handlerchain/.env"), override=False)

if __name__ == "__main__":
    app()
