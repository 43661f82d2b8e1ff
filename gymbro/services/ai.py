# ai.py

import json
import logging
import re

import requests
from flask import current_app

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = 'You are a fitness and nutrition expert assistant.'

FENCED_JSON = re.compile(r'```json\s*\n([\s\S]*?)\n\s*```')
FENCED_ANY = re.compile(r'```\s*\n([\s\S]*?)\n\s*```')


class AIServiceError(Exception):
    """Raised when the completion API cannot be reached or answers with an error."""

    def __init__(self, message, status=None):
        super().__init__(message)
        self.message = message
        self.status = status


# FUNCTION call_ai
def call_ai(prompt):
    api_key = current_app.config.get('AI_API_KEY')
    if not api_key:
        raise AIServiceError('AI service is not configured')

    payload = {
        'model': current_app.config['AI_MODEL'],
        'messages': [
            { 'role': 'system', 'content': SYSTEM_PROMPT },
            { 'role': 'user', 'content': prompt }
        ],
        'temperature': 0.7,
        'max_tokens': 800
    }
    headers = {
        'Content-Type': 'application/json',
        'Authorization': f'Bearer {api_key}'
    }

    try:
        response = requests.post(current_app.config['AI_API_ENDPOINT'], json=payload, headers=headers,
                                 timeout=current_app.config['AI_TIMEOUT'])
    except requests.RequestException as e:
        logger.error('AI API request failed: %s', e)
        raise AIServiceError('Failed to get response from AI service') from e

    if response.status_code != 200:
        logger.error('AI API returned %s: %s', response.status_code, response.text[:500])
        raise AIServiceError('Failed to get response from AI service', response.status_code)

    try:
        return response.json()['choices'][0]['message']['content']
    except (ValueError, KeyError, IndexError, TypeError) as e:
        logger.error('Unexpected AI API response shape: %s', response.text[:500])
        raise AIServiceError('Unexpected response from AI service') from e


def _candidates(text):
    for pattern in (FENCED_JSON, FENCED_ANY):
        match = pattern.search(text)
        if match:
            yield match.group(1)

    # first bracketed span
    starts = [index for index in (text.find('{'), text.find('[')) if index != -1]
    if starts:
        start = min(starts)
        end = text.rfind('}' if text[start] == '{' else ']')
        if end > start:
            yield text[start:end + 1]

    yield text


# FUNCTION parse_ai_response
def parse_ai_response(text):
    """Pull a JSON value out of a completion, tolerating markdown fences and surrounding prose."""
    for candidate in _candidates(text or ''):
        try:
            return json.loads(candidate)
        except ValueError:
            continue

    logger.warning('Could not parse AI response as JSON')
    return { 'error': 'Failed to parse AI response', 'raw': text }


# prompts

def workout_plan_prompt(fitness_level, goals, days_per_week, equipment, extra=None):
    prompt = (f'Create a {days_per_week}-day workout plan for a {fitness_level} level individual '
              f'with {equipment} equipment, targeting: {goals}.')

    if extra:
        details = ', '.join(f'{key}: {value}' for key, value in extra.items())
        prompt += f' Take into account: {details}.'

    return prompt + (' Format response as a JSON object with a title, an introduction, a schedule array of days'
                     ' (day, focus, exercises with name, sets, reps and rest) and a tips array.')


def nutrition_advice_prompt(goal, dietary_restrictions, current_weight, target_weight):
    return ('Create a personalized nutrition plan with the following details:\n'
            f'- Goal: {goal}\n'
            f'- Dietary restrictions: {dietary_restrictions or "none"}\n'
            f'- Current weight: {current_weight} kg\n'
            f'- Target weight: {target_weight} kg\n'
            'Include a daily calorie target, a macronutrient breakdown, meal timing recommendations, '
            'a sample meal plan for a day and foods to focus on and avoid. '
            'Format the response as a structured JSON object.')


def nutrition_prompt(food, quantity=None):
    item = f'{quantity} of {food}' if quantity else food
    return (f'Provide detailed nutritional information for "{item}" in JSON format. '
            'Include calories, protein, carbs, fat, fiber, vitamins, and minerals. '
            'Format the response as a structured JSON object.')


def fitness_tips_prompt(category):
    return (f'Provide 5 evidence-based fitness tips for the "{category}" category. '
            'Format the response as a JSON array of tips with title and description for each.')
