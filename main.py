from dotenv import load_dotenv

load_dotenv()

from mongo_mcp.runner import run

if __name__ == "__main__":
    run()
