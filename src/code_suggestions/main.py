# src/code_suggestions/main.py
from dotenv import load_dotenv
load_dotenv()
import asyncio
import os
import logging
import argparse

from quart import Quart
from quart_cors import cors
import hypercorn.asyncio
from hypercorn.config import Config

from code_suggestions.core.config import APP_CONFIG
from code_suggestions.core.gate import ProcessingGate
from code_suggestions.completion.service import CompletionService
from code_suggestions.llm.handler import create_ollama_client

app_logger = logging.getLogger("quart.app")


def configure_logging(log_dir: str = "logs", level: int = logging.INFO):
    """
    Console logging for the app plus a file log of every prompt and raw
    model response. The conversation log is rewritten on each start.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.INFO)

    app_logger.setLevel(level)
    app_logger.handlers.clear()
    app_logger.addHandler(handler)
    app_logger.propagate = False # Prevent duplicate messages in the root logger

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("hypercorn.access").propagate = False
    logging.getLogger("hypercorn.error").propagate = False

    os.makedirs(log_dir, exist_ok=True)
    llm_log_handler = logging.FileHandler(os.path.join(log_dir, "llm_conversation.log"), mode="w")
    llm_log_handler.setFormatter(logging.Formatter('%(asctime)s - %(message)s'))
    llm_logger = logging.getLogger("llm_conversation")
    llm_logger.setLevel(logging.INFO)
    llm_logger.handlers.clear()
    llm_logger.addHandler(llm_log_handler)
    llm_logger.propagate = False


def create_app(service: CompletionService = None):
    """
    Builds the Quart app. Without an explicit `service`, one is created from
    APP_CONFIG with a fresh Ollama client and processing gate.
    """
    app = Quart(__name__)
    app = cors(app, allow_origin="*")

    owns_client = service is None
    if service is None:
        service = CompletionService(
            client=create_ollama_client(APP_CONFIG),
            gate=ProcessingGate(),
            config=APP_CONFIG,
        )
    app.extensions["completion_service"] = service

    from code_suggestions.api.routes import api_bp
    app.register_blueprint(api_bp)

    @app.before_serving
    async def startup():
        app_logger.info(
            f"Completion service ready: model={service.config.MODEL_NAME}, template={service.template.name}, "
            f"endpoint={service.config.OLLAMA_HOST}{service.config.GENERATE_PATH}"
        )

    @app.after_serving
    async def shutdown():
        if owns_client:
            await service.client.aclose()

    return app


async def main(args):
    app = create_app()
    print("\n--- Starting Hypercorn Server for Quart App ---")
    print(f"Server starting on http://{args.host}:{args.port}")
    config = Config()
    config.bind = [f"{args.host}:{args.port}"]
    config.accesslog = None
    config.errorlog = None
    await hypercorn.asyncio.serve(app, config)


def cli():
    parser = argparse.ArgumentParser(description="Run the code suggestions FIM completion server.")
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host address to bind the server to. Use '0.0.0.0' for Docker."
    )
    parser.add_argument(
        "--port",
        type=int,
        default=3000,
        help="Port to bind the server to."
    )
    parser.add_argument("--log-dir", type=str, default="logs", help="Directory for the LLM conversation log.")
    parser.add_argument("--debug", action="store_true", help="Log windowing and suggestion details.")
    args = parser.parse_args()

    configure_logging(args.log_dir, logging.DEBUG if args.debug else logging.INFO)

    try:
        asyncio.run(main(args))
    except KeyboardInterrupt:
        print("\nServer shut down.")


if __name__ == "__main__":
    cli()
