# catcare/services/test_advice_service.py
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from catcare.models.cat import Cat
from catcare.models.care_log import CareLog, LogType
from catcare.services.advice_service import (
    ADVICE_ERROR_MESSAGE,
    EMPTY_ADVICE_MESSAGE,
    EMPTY_VISION_MESSAGE,
    VISION_ERROR_MESSAGE,
    AdviceService,
    build_advice_prompt,
    summarize_log,
)

CAT = Cat(cat_id='c1', name='Luna', breed='Certosino', age=3.0, weight=4.25, gender='Femmina')


def make_log(index, log_type=LogType.FEEDING, notes='', value=None):
    return CareLog(
        log_id=f'l{index}', catId='c1', type=log_type,
        timestamp=datetime(2024, 10, 20, 9, 0, tzinfo=timezone.utc) - timedelta(days=index),
        notes=notes, value=value
    )


def completion(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


@pytest.fixture
def service():
    service = AdviceService()
    service.client = MagicMock()
    return service


def test_summarize_log_formats():
    assert summarize_log(make_log(0, LogType.WEIGHT, 'bilancia', '4.3')) == "- 20/10/2024 [Peso]: bilancia (4.3)"
    assert summarize_log(make_log(1, LogType.LITTER)) == "- 19/10/2024 [Lettiera]:  "


def test_prompt_contains_profile_question_and_ten_most_recent_logs():
    logs = [make_log(i, notes=f'nota {i}') for i in range(15)]

    prompt = build_advice_prompt(CAT, logs, "Miagola di notte, è normale?")

    assert prompt.startswith("Sei un esperto assistente veterinario e comportamentista felino.")
    assert "- Nome: Luna" in prompt
    assert "- Razza: Certosino" in prompt
    assert "- Età: 3 anni" in prompt
    assert "- Peso: 4.25 kg" in prompt
    assert "- Sesso: Femmina" in prompt
    assert 'Domanda dell\'utente: "Miagola di notte, è normale?"' in prompt
    assert "nota 9" in prompt
    assert "nota 10" not in prompt
    assert prompt.count("[Alimentazione]") == 10


def test_request_advice_returns_generated_text(service):
    service.client.chat.completions.create.return_value = completion("Dalle più gioco la sera.")

    answer = service.request_advice(CAT, [make_log(0)], "Miagola di notte")

    assert answer == "Dalle più gioco la sera."
    kwargs = service.client.chat.completions.create.call_args.kwargs
    assert kwargs['model'] == service.model
    assert kwargs['messages'][0]['content'] == build_advice_prompt(CAT, [make_log(0)], "Miagola di notte")


def test_request_advice_empty_response_uses_fallback(service):
    service.client.chat.completions.create.return_value = completion("")
    assert service.request_advice(CAT, [], "?") == EMPTY_ADVICE_MESSAGE


def test_request_advice_swallows_errors(service):
    service.client.chat.completions.create.side_effect = TimeoutError("upstream timeout")
    assert service.request_advice(CAT, [], "?") == ADVICE_ERROR_MESSAGE


def test_uninitialized_service_returns_fallback():
    assert AdviceService().request_advice(CAT, [], "?") == ADVICE_ERROR_MESSAGE
    assert AdviceService().identify_breed_or_issue("abcd", "Che razza è?") == VISION_ERROR_MESSAGE


def test_identify_breed_sends_inline_image(service):
    service.client.chat.completions.create.return_value = completion("Sembra un Maine Coon.")

    text = service.identify_breed_or_issue("aGVsbG8=", "Che razza è")

    assert text == "Sembra un Maine Coon."
    content = service.client.chat.completions.create.call_args.kwargs['messages'][0]['content']
    assert content[0]['image_url']['url'] == "data:image/jpeg;base64,aGVsbG8="
    assert content[1]['text'] == "Sei un esperto di gatti. Che razza è. Rispondi in italiano."


def test_identify_breed_fallbacks(service):
    service.client.chat.completions.create.return_value = completion(None)
    assert service.identify_breed_or_issue("aGVsbG8=", "Che razza è") == EMPTY_VISION_MESSAGE

    service.client.chat.completions.create.side_effect = RuntimeError("quota")
    assert service.identify_breed_or_issue("aGVsbG8=", "Che razza è") == VISION_ERROR_MESSAGE


def test_init_app_requires_api_key():
    app = SimpleNamespace(config={'OPENAI_API_KEY': None})
    with pytest.raises(ValueError):
        AdviceService().init_app(app)
