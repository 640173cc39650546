from flask import Flask, request, jsonify

from config import Config
from errors import QuizAppError, classify_error
from log_config import setup_logging, get_logger
from services.ai_service import AIService
from services.quiz_service import QuizService
from services.explain_service import ExplainService

logger = get_logger(__name__)


def _json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def create_app(config: Config | None = None, ai=None) -> Flask:
    config = config or Config.from_env()
    ai = ai or AIService(config)
    quiz = QuizService(config, ai)
    explainer = ExplainService(config, ai)

    if not config.has_api_key:
        logger.warning("OPENAI_API_KEY is not set. Requests to /api/generate-quiz "
                       "and /api/explain will fail.")

    app = Flask(__name__)
    app.config["APP_CONFIG"] = config

    def internal_error(exc: Exception, endpoint: str):
        logger.exception("Unhandled error in %s", endpoint)
        return jsonify({
            "error": "Internal server error.",
            "debug": classify_error(exc, config.has_api_key),
        }), 500

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    @app.route("/api/generate-quiz", methods=["POST"])
    def generate_quiz():
        try:
            result = quiz.generate(_json_body())
        except QuizAppError as e:
            logger.warning("/api/generate-quiz failed: %s (%s)", e.error, e.debug)
            return jsonify(e.to_dict()), e.status_code
        except Exception as e:
            return internal_error(e, "/api/generate-quiz")
        return jsonify(result.to_json())

    @app.route("/api/explain", methods=["POST"])
    def explain():
        try:
            result = explainer.explain(_json_body())
        except QuizAppError as e:
            logger.warning("/api/explain failed: %s (%s)", e.error, e.debug)
            return jsonify(e.to_dict()), e.status_code
        except Exception as e:
            return internal_error(e, "/api/explain")
        return jsonify(result.to_json())

    return app


app = create_app()

if __name__ == "__main__":
    settings = app.config["APP_CONFIG"]
    setup_logging(settings.log_level)
    app.run(port=settings.port, debug=settings.debug)
