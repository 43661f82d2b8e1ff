# ai.py

from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from gymbro.services import ai

ai_bp = Blueprint('ai_bp', __name__)

WORKOUT_EXTRAS = ['age', 'weight', 'height', 'gender', 'healthConditions']


def _first(data, *keys):
    for key in keys:
        value = data.get(key)
        if value not in (None, ''):
            return value
    return None


def _validation_error(errors):
    return { 'message': 'Validation error', 'errors': errors }, 400


# generate_workout_plan()
@ai_bp.route('/workout-plan', methods=['POST'])
@ai_bp.route('/generate-workout-plan', methods=['POST'])
@jwt_required()
def generate_workout_plan():
    data = request.get_json(silent=True) or {}

    fitness_level = _first(data, 'fitnessLevel', 'level')
    goals = _first(data, 'goals', 'goal')
    equipment = _first(data, 'equipment', 'preferences') or 'no special'
    days_per_week = data.get('daysPerWeek')

    errors = {}
    if not fitness_level:
        errors['fitnessLevel'] = 'Fitness level is required'
    if not goals:
        errors['goals'] = 'Fitness goals are required'
    try:
        days_per_week = int(days_per_week)
        if not 1 <= days_per_week <= 7:
            raise ValueError
    except (TypeError, ValueError):
        errors['daysPerWeek'] = 'Days per week must be between 1-7'

    if errors:
        return _validation_error(errors)

    extra = { key: data[key] for key in WORKOUT_EXTRAS if data.get(key) not in (None, '') }
    prompt = ai.workout_plan_prompt(fitness_level, goals, days_per_week, equipment, extra)

    workoutPlan = ai.parse_ai_response(ai.call_ai(prompt))

    return { 'workoutPlan': workoutPlan }, 200


# generate_nutrition_advice()
@ai_bp.route('/nutrition-advice', methods=['POST'])
@jwt_required()
def generate_nutrition_advice():
    data = request.get_json(silent=True) or {}

    goal = data.get('goal')
    errors = {}

    if not goal:
        errors['goal'] = 'Goal is required'

    weights = {}
    for key in ('currentWeight', 'targetWeight'):
        try:
            weights[key] = float(data.get(key))
            if weights[key] <= 0:
                raise ValueError
        except (TypeError, ValueError):
            errors[key] = f'{key} must be a positive number'

    if errors:
        return _validation_error(errors)

    prompt = ai.nutrition_advice_prompt(goal, data.get('dietaryRestrictions'),
                                        weights['currentWeight'], weights['targetWeight'])

    nutritionAdvice = ai.parse_ai_response(ai.call_ai(prompt))

    return { 'nutritionAdvice': nutritionAdvice }, 200


# calculate_nutrition()
@ai_bp.route('/calculate-nutrition', methods=['POST'])
@jwt_required()
def calculate_nutrition():
    data = request.get_json(silent=True) or {}
    food = (data.get('food') or '').strip() if isinstance(data.get('food'), str) else None

    if not food:
        return _validation_error({ 'food': 'Food item is required' })

    nutritionInfo = ai.parse_ai_response(ai.call_ai(ai.nutrition_prompt(food, data.get('quantity'))))

    return { 'nutritionInfo': nutritionInfo }, 200


# get_fitness_tips()
@ai_bp.route('/fitness-tips', methods=['GET'])
@jwt_required()
def get_fitness_tips():
    category = request.args.get('category') or 'general'

    fitnessTips = ai.parse_ai_response(ai.call_ai(ai.fitness_tips_prompt(category)))

    return { 'fitnessTips': fitnessTips }, 200
