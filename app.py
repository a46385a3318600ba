import os
from dotenv import load_dotenv

# UČITAJ .env NA SAMOM POČETKU
BASE_DIR = os.path.dirname(__file__)
load_dotenv(dotenv_path=os.path.join(BASE_DIR, '.env'))

from flask import Flask, jsonify, request
from pydantic import ValidationError

from models import Article, Question
from services.logging import configure_logging, get_logger
from services.providers import get_capability
import services.extract_text as extract_text
import services.layout as layout
import services.quizzer as quizzer
import services.summarizer as summarizer

configure_logging()
logger = get_logger(__name__)


class BadInput(Exception):
    """Client sent something the API cannot work with (HTTP 400)."""


def create_app(capability=None) -> Flask:
    app = Flask(__name__)
    app.config['AI_CAPABILITY'] = capability or get_capability()
    app.config['MAX_CONTENT_LENGTH'] = int(os.getenv('MAX_UPLOAD_MB', '16')) * 1024 * 1024
    logger.info("app_started", provider=app.config['AI_CAPABILITY'].name)

    def _capability():
        return app.config['AI_CAPABILITY']

    def _bad_request(message: str, **details):
        body = {'error': message}
        body.update(details)
        return jsonify(body), 400

    def _article():
        """Article from the JSON body; raises BadInput with a client-facing message."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise BadInput('Expected a JSON object with "title" and "text".')
        article = Article.model_validate(data)
        if not article.text.strip():
            raise BadInput('Article text is empty.')
        return article

    @app.errorhandler(ValidationError)
    def _validation_failed(e):
        return _bad_request('Invalid request body.', details=e.errors(include_url=False, include_context=False))

    @app.errorhandler(BadInput)
    def _bad_input(e):
        return _bad_request(str(e))

    @app.get('/health')
    def health():
        return jsonify({'status': 'ok', 'provider': _capability().name})

    # ============== SUMMARY ==============

    @app.post('/api/summary')
    def summary():
        article = _article()
        text = summarizer.summarize(article.text, _capability())
        return jsonify({
            'title': article.title or 'Summary',
            'summary': text,
            'word_count': summarizer.word_count(text),
            'image': article.image,
        })

    # ============== MINDMAP ==============

    @app.post('/api/mindmap')
    def mindmap():
        article = _article()
        result = layout.build_mindmap(article.title, article.text, _capability())
        return jsonify(result.model_dump(exclude_none=True))

    # ============== QUIZ ==============

    @app.post('/api/quiz')
    def quiz():
        article = _article()
        outcome = quizzer.QuizOrchestrator(_capability()).run(article.text)
        return jsonify({
            'questions': [q.model_dump() for q in outcome.questions],
            'source': outcome.source,
            'provider': _capability().name,
        })

    @app.post('/api/quiz/grade')
    def quiz_grade():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise BadInput('Expected a JSON object with "questions" and "answers".')
        questions = [Question.model_validate(q) for q in data.get('questions') or []]
        answers = data.get('answers') or []
        if not isinstance(answers, (list, dict)):
            raise BadInput('Answers must be a list or an object keyed by question index.')
        if isinstance(answers, dict):
            try:
                answers = {int(k): v for k, v in answers.items()}
            except ValueError:
                raise BadInput('Answer keys must be question indexes.')
        result = quizzer.grade_quiz(questions, answers)
        return jsonify(result.model_dump())

    # ============== ARTICLE SOURCES ==============

    @app.post('/api/article/pdf')
    def article_from_pdf():
        file = request.files.get('file')
        if not file or not file.filename:
            raise BadInput('Upload a PDF file in the "file" field.')
        if not file.filename.lower().endswith('.pdf'):
            raise BadInput('Only PDF files are supported.')
        article = extract_text.from_pdf(file.stream, fallback_title=os.path.splitext(file.filename)[0])
        if not article.text.strip():
            raise BadInput('No text could be extracted from the PDF.')
        return jsonify(article.model_dump())

    return app


if __name__ == '__main__':
    create_app().run(debug=os.getenv('FLASK_DEBUG') == '1')
