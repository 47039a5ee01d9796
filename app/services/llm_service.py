import json
import re

import httpx

from app.core.config import settings
from app.core.errors import VendorError
from app.core.logger import logger
from app.interview_templates import language_name
from app.schemas.interview import (
    GeneratedQuestion,
    InterviewContext,
    InterviewEvaluation,
    ResponseEvaluation,
)

QUESTION_SYSTEM_PROMPT = "You are an expert interviewer for bank sales positions in India. Generate contextual interview questions based on the provided information. Always respond in valid JSON format."
EVALUATION_SYSTEM_PROMPT = "You are an expert evaluator for bank sales interviews. Provide detailed, constructive feedback on candidate responses. Always respond in valid JSON format."
FINAL_SYSTEM_PROMPT = "You are a senior hiring manager evaluating bank sales candidates. Provide comprehensive evaluation with scores and recommendations. Always respond in valid JSON format."


def _client(timeout=None):
    return httpx.AsyncClient(timeout=timeout or settings.HTTP_TIMEOUT)


async def chat_completion(messages, temperature=0.3, max_tokens=1000, json_mode=False):
    """Single chat completion call, returns the message content."""
    if not settings.OPENAI_API_KEY:
        raise VendorError("OpenAI", 401, "API key not configured")

    payload = {
        "model": settings.OPENAI_MODEL,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    if json_mode:
        payload["response_format"] = {"type": "json_object"}

    async with _client() as client:
        response = await client.post(
            f"{settings.OPENAI_BASE_URL}/chat/completions",
            headers={
                "Authorization": f"Bearer {settings.OPENAI_API_KEY}",
                "Content-Type": "application/json"
            },
            json=payload
        )

    if response.status_code != 200:
        logger.error(f"OpenAI error {response.status_code}: {response.text[:500]}")
        raise VendorError("OpenAI", response.status_code, response.text)

    try:
        data = response.json()
        return data['choices'][0]['message'].get('content') or ""
    except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
        logger.error(f"Malformed OpenAI reply ({e!r}): {response.text[:200]}")
        raise VendorError("OpenAI", 502, "Malformed chat completion response")


def parse_json_reply(reply_text):
    """Extract the JSON object from a model reply.

    json_object mode normally returns bare JSON, but fenced blocks and
    leading prose still show up from some deployments.
    """
    code_block = re.search(r'```(?:json)?\s*(.*?)\s*```', reply_text, re.DOTALL)
    if code_block:
        json_str = code_block.group(1)
    else:
        json_match = re.search(r'\{.*\}', reply_text, re.DOTALL)
        json_str = json_match.group(0) if json_match else ""

    if not json_str:
        raise ValueError(f"No JSON object in model reply: {reply_text[:200]}")
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in model reply: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("Model reply JSON is not an object")
    return data


def _context_json(context: InterviewContext):
    return context.model_dump_json(by_alias=True)


def build_question_prompt(context: InterviewContext):
    lang = language_name(context.language)
    previous = json.dumps(
        [r.model_dump(by_alias=True, exclude={"timestamp"}) for r in context.previous_responses],
        ensure_ascii=False,
    )
    return f"""Generate an interview question for a bank sales representative position with the following context:

Language: {lang}
Interview Type: {context.interview_type}
Experience Level: {context.experience_level}
Candidate Name: {context.candidate_name}
Current Question Index: {context.current_question_index}
Previous Responses: {previous}

Requirements:
1. Question should be in {lang} language
2. Focus on door-to-door banking sales scenarios
3. Make it relevant to {context.experience_level} level candidates
4. Build upon previous responses if available
5. Include realistic banking scenarios and customer objections

Respond in JSON format with:
{{
  "question": "The interview question in {lang}",
  "expectedKeyPoints": ["key point 1", "key point 2", "key point 3"],
  "followUpQuestions": ["follow up 1", "follow up 2"],
  "scoringCriteria": {{
    "excellent": "Criteria for 9-10 score",
    "good": "Criteria for 7-8 score",
    "average": "Criteria for 5-6 score",
    "poor": "Criteria for 1-4 score"
  }}
}}"""


def build_evaluation_prompt(question, answer, context: InterviewContext):
    return f"""Evaluate this interview response for a bank sales position:

Question: {question}
Response: {answer}
Context: {_context_json(context)}

Evaluation Criteria:
1. Communication clarity and confidence
2. Product knowledge and accuracy
3. Sales technique effectiveness
4. Customer empathy and rapport
5. Problem-solving approach
6. Language proficiency

Respond in JSON format with:
{{
  "score": 8,
  "feedback": "Detailed feedback on the response",
  "strengths": ["strength 1", "strength 2"],
  "improvements": ["improvement area 1", "improvement area 2"],
  "followUpSuggestion": "Suggested follow-up question or topic",
  "languageMetrics": {{"accuracy": 8, "fluency": 7, "vocabulary": 7}}
}}

Score should be 1-10 where:
- 9-10: Excellent response demonstrating mastery
- 7-8: Good response with minor areas for improvement
- 5-6: Average response meeting basic requirements
- 3-4: Below average response with significant gaps
- 1-2: Poor response requiring major improvement

languageMetrics rate the candidate's use of {language_name(context.language)} on the same 1-10 scale."""


def build_final_evaluation_prompt(transcript, context: InterviewContext):
    transcript_json = json.dumps([t.model_dump(by_alias=True, exclude_none=True) for t in transcript], ensure_ascii=False)
    return f"""Provide a comprehensive evaluation of this bank sales interview:

Transcript: {transcript_json}
Context: {_context_json(context)}

Analyze the candidate's performance across:
1. Communication Skills (clarity, confidence, language proficiency)
2. Product Knowledge (banking products, procedures, regulations)
3. Sales Technique (approach, persuasion, closing skills)
4. Customer Handling (empathy, objection handling, relationship building)
5. Language Skills (fluency, professional communication)

Respond in JSON format with:
{{
  "overallScore": 85,
  "categories": {{
    "communication": 8,
    "productKnowledge": 7,
    "salesTechnique": 9,
    "customerHandling": 8,
    "languageSkills": 9
  }},
  "feedback": "Comprehensive feedback on overall performance",
  "recommendations": [
    "Specific recommendation 1",
    "Specific recommendation 2",
    "Specific recommendation 3"
  ]
}}

Overall score should be 0-100, category scores should be 1-10."""


async def generate_interview_question(context: InterviewContext) -> GeneratedQuestion:
    reply_text = await chat_completion(
        [
            {"role": "system", "content": QUESTION_SYSTEM_PROMPT},
            {"role": "user", "content": build_question_prompt(context)}
        ],
        temperature=0.7,
        max_tokens=1000,
        json_mode=True,
    )
    question = GeneratedQuestion.model_validate(parse_json_reply(reply_text))
    logger.info(f"📝 Question {context.current_question_index} for {context.candidate_name}: {question.question[:80]}")
    return question


async def evaluate_response(question, answer, context: InterviewContext) -> ResponseEvaluation:
    reply_text = await chat_completion(
        [
            {"role": "system", "content": EVALUATION_SYSTEM_PROMPT},
            {"role": "user", "content": build_evaluation_prompt(question, answer, context)}
        ],
        temperature=0.3,
        max_tokens=800,
        json_mode=True,
    )
    evaluation = ResponseEvaluation.model_validate(parse_json_reply(reply_text))
    logger.info(f"Scored answer to question {context.current_question_index}: {evaluation.score}/10")
    return evaluation


async def generate_final_evaluation(transcript, context: InterviewContext) -> InterviewEvaluation:
    reply_text = await chat_completion(
        [
            {"role": "system", "content": FINAL_SYSTEM_PROMPT},
            {"role": "user", "content": build_final_evaluation_prompt(transcript, context)}
        ],
        temperature=0.2,
        max_tokens=1200,
        json_mode=True,
    )
    return InterviewEvaluation.model_validate(parse_json_reply(reply_text))


async def translate_to_english(text, source_language):
    """Best-effort translation; the original text comes back if the call fails."""
    try:
        reply = await chat_completion(
            [
                {"role": "system", "content": f"Translate the following text from {language_name(source_language)} to English. Maintain the original meaning and tone."},
                {"role": "user", "content": text}
            ],
            temperature=0.1,
            max_tokens=500,
        )
        return reply.strip() or text
    except (VendorError, httpx.HTTPError, ValueError, KeyError, IndexError) as e:
        logger.warning(f"Translation failed, keeping original text: {e}")
        return text


async def validate_connection():
    if not settings.OPENAI_API_KEY:
        return False
    try:
        await chat_completion([{"role": "user", "content": "Test connection"}], max_tokens=10)
        return True
    except (VendorError, httpx.HTTPError, ValueError, KeyError, IndexError) as e:
        logger.warning(f"OpenAI connection validation failed: {e}")
        return False
