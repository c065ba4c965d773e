import logging

import uvicorn
from leanmeal.api.api_run import create_app
from leanmeal.utilities.config import APP_HOST, APP_PORT, LOG_LEVEL


def main():
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = create_app()
    # Print a friendly message that points to the tool listing
    print(f"Meal planner tools listed at http://localhost:{APP_PORT}/tools (Press CTRL+C to quit)")
    uvicorn.run(app, host=APP_HOST, port=APP_PORT)


if __name__ == "__main__":
    main()
