from flask import Blueprint, jsonify, request, current_app
from playsib import db
from playsib.models import Question, SubmittedQuestion
from sqlalchemy import func
import json

questions = Blueprint('questions', __name__)


def load_active_questions(category, limit=None):
    """Active questions of one category, oldest first."""
    q = Question.query.filter_by(category=category, is_active=True).order_by(Question.created_at.asc(), Question.id.asc())
    if limit:
        q = q.limit(limit)
    return q.all()


@questions.route('/categories', methods=['GET'])
def list_categories():
    return jsonify(current_app.config['CATEGORIES'])


@questions.route('', methods=['GET'])
def get_by_category():
    category = request.args.get('category')
    if not category:
        return jsonify({'error': 'category is required'}), 400
    limit = request.args.get('limit', 10, type=int)
    return jsonify([q.to_dict() for q in load_active_questions(category, limit)])


@questions.route('/random', methods=['GET'])
def get_random():
    exclude = request.args.getlist('exclude', type=int)
    limit = request.args.get('limit', 1, type=int)
    q = Question.query.filter_by(is_active=True)
    if exclude:
        q = q.filter(Question.id.notin_(exclude))
    picked = q.order_by(func.random()).limit(limit).all()
    return jsonify([p.to_dict() for p in picked])


@questions.route('/submit', methods=['POST'])
def submit_question():
    data = request.get_json(silent=True) or {}
    text = (data.get('text') or '').strip()
    category = (data.get('category') or '').strip()
    options = data.get('options') or []
    answer = data.get('answer') or ''

    if not (10 <= len(text) <= 500):
        return jsonify({'error': 'Question text must be 10-500 characters'}), 400
    if not category:
        return jsonify({'error': 'category is required'}), 400
    if not isinstance(options, list) or len(options) != 4 or not all(isinstance(o, str) and o for o in options):
        return jsonify({'error': 'Exactly 4 options are required'}), 400
    if options.count(answer) != 1:
        return jsonify({'error': 'The answer must be exactly one of the options'}), 400

    submitted = SubmittedQuestion(
        text=text,
        category=category,
        options=json.dumps(options),
        answer=answer,
    )
    db.session.add(submitted)
    db.session.commit()
    current_app.logger.info(f"[question-submit] id={submitted.id} category={category!r}")
    return jsonify(submitted.to_dict()), 201
