# catcare/services/advice_service.py
import logging
from typing import Sequence

from flask import Flask
from openai import OpenAI

from catcare.models.cat import Cat
from catcare.models.care_log import CareLog
from catcare.utils.datetime_utils import DateTimeUtils

DEFAULT_MODEL = "gpt-4o-mini"
ADVICE_LOG_LIMIT = 10

EMPTY_ADVICE_MESSAGE = "Mi dispiace, non sono riuscito a generare una risposta al momento."
ADVICE_ERROR_MESSAGE = "Si è verificato un errore nel contattare l'assistente AI."
EMPTY_VISION_MESSAGE = "Non sono riuscito ad analizzare l'immagine."
VISION_ERROR_MESSAGE = "Errore durante l'analisi dell'immagine."

ADVICE_PROMPT_TEMPLATE = """Sei un esperto assistente veterinario e comportamentista felino.

Profilo Gatto:
- Nome: {name}
- Razza: {breed}
- Età: {age} anni
- Peso: {weight} kg
- Sesso: {gender}

Attività Recenti:
{logs_summary}

Domanda dell'utente: "{question}"

Rispondi in italiano in modo amichevole, conciso e professionale. Se la situazione sembra grave, consiglia sempre di visitare un veterinario reale."""


def _format_number(value: float) -> str:
    # 3.0 -> "3", 4.25 -> "4.25"
    return f"{value:g}"


def summarize_log(log: CareLog) -> str:
    """기록 한 건을 프롬프트용 한 줄 요약으로 변환합니다."""
    value_part = f"({log.value})" if log.value else ""
    return f"- {DateTimeUtils.to_local_date_string(log.timestamp)} [{log.type.value}]: {log.notes} {value_part}"


def build_advice_prompt(cat: Cat, recent_logs: Sequence[CareLog], question: str,
                        log_limit: int = ADVICE_LOG_LIMIT) -> str:
    """고양이 프로필, 최근 기록(최대 log_limit개), 질문으로 상담 프롬프트를 구성합니다."""
    logs_summary = "\n".join(summarize_log(log) for log in list(recent_logs)[:log_limit])
    return ADVICE_PROMPT_TEMPLATE.format(
        name=cat.name,
        breed=cat.breed,
        age=_format_number(cat.age),
        weight=_format_number(cat.weight),
        gender=cat.gender,
        logs_summary=logs_summary,
        question=question
    )


class AdviceService:
    """
    OpenAI API 연동을 담당하는 서비스 클래스.
    고양이 케어 상담과 사진 기반 품종/증상 분석 기능을 제공합니다.

    호출 실패는 예외로 전파하지 않고 사용자에게 보여줄 안내 문구로 대체합니다.
    재시도, 캐싱, 호출 제한은 하지 않습니다.
    """

    def __init__(self):
        """
        OpenAI 클라이언트를 None으로 초기화합니다.
        실제 클라이언트는 init_app 메서드를 통해 설정됩니다.
        """
        self.client = None
        self.model = DEFAULT_MODEL
        self.log_limit = ADVICE_LOG_LIMIT

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 OpenAI 클라이언트를 설정합니다.

        :param app: Flask 애플리케이션 객체
        """
        api_key = app.config.get('OPENAI_API_KEY')
        if not api_key:
            raise ValueError("OPENAI_API_KEY 설정이 .env 파일에 필요합니다.")

        self.client = OpenAI(api_key=api_key)
        self.model = app.config.get('OPENAI_MODEL') or DEFAULT_MODEL
        self.log_limit = app.config.get('ADVICE_LOG_LIMIT', ADVICE_LOG_LIMIT)
        logging.info(f"AdviceService: OpenAI 클라이언트 초기화 완료 (model: {self.model})")

    def request_advice(self, cat: Cat, recent_logs: Sequence[CareLog], question: str) -> str:
        """
        고양이 정보와 최근 기록을 바탕으로 사용자의 질문에 대한 조언을 생성합니다.

        :param cat: 상담 대상 고양이
        :param recent_logs: 최신순으로 정렬된 케어 기록
        :param question: 사용자 질문
        :return: 생성된 답변 또는 안내 문구
        """
        prompt = build_advice_prompt(cat, recent_logs, question, self.log_limit)
        try:
            if not self.client:
                raise RuntimeError("AdviceService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")

            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}]
            )
            text = response.choices[0].message.content
            return text or EMPTY_ADVICE_MESSAGE

        except Exception as e:
            logging.error(f"AI 상담 요청 실패 (cat: {cat.cat_id}): {e}", exc_info=True)
            return ADVICE_ERROR_MESSAGE

    def identify_breed_or_issue(self, image_base64: str, prompt: str) -> str:
        """
        고양이 사진(base64 JPEG)을 분석하여 품종 또는 건강 이슈에 대한 설명을 생성합니다.

        :param image_base64: base64로 인코딩된 JPEG 이미지 데이터
        :param prompt: 사용자가 입력한 분석 요청
        :return: 분석 결과 텍스트 또는 안내 문구
        """
        try:
            if not self.client:
                raise RuntimeError("AdviceService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")

            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "image_url",
                                "image_url": {"url": f"data:image/jpeg;base64,{image_base64}"}
                            },
                            {
                                "type": "text",
                                "text": f"Sei un esperto di gatti. {prompt}. Rispondi in italiano."
                            }
                        ]
                    }
                ]
            )
            text = response.choices[0].message.content
            return text or EMPTY_VISION_MESSAGE

        except Exception as e:
            logging.error(f"이미지 분석 요청 실패: {e}", exc_info=True)
            return VISION_ERROR_MESSAGE
