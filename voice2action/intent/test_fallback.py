from voice2action.intent.categories import color_for, detect_category, parse_category
from voice2action.intent.fallback import DEFAULT_EMAIL_SUBJECT, classify
from voice2action.intent.types import Category, Intent


def test_email_with_address() -> None:
    text = "Отправь письмо на test@example.com с темой Привет"

    result = classify(text)

    assert result.intent is Intent.EMAIL
    assert result.recipient == "test@example.com"
    assert result.subject == DEFAULT_EMAIL_SUBJECT
    assert result.body == text
    assert result.title == ""
    assert result.start_time is None


def test_email_without_address_has_empty_recipient() -> None:
    result = classify("send a note to the team")

    assert result.intent is Intent.EMAIL
    assert result.recipient == ""


def test_calendar_keeps_times_unset() -> None:
    text = "Встреча по проекту завтра " + "очень " * 30

    result = classify(text)

    assert result.intent is Intent.CALENDAR
    assert result.title == text[:100]
    assert result.start_time is None
    assert result.end_time is None
    assert result.description == text
    assert result.category is Category.WORK
    assert result.recipient == ""


def test_general_echoes_input() -> None:
    result = classify("Какая сегодня погода?")

    assert result.intent is Intent.GENERAL
    assert result.response == "Какая сегодня погода?"
    assert result.category is Category.CASUAL


def test_email_terms_win_over_calendar_terms() -> None:
    assert classify("send meeting notes").intent is Intent.EMAIL


def test_classification_is_deterministic() -> None:
    text = "Создай событие: тренировка в зале"

    assert classify(text) == classify(text)


def test_category_detection_ignores_case() -> None:
    assert detect_category("РАБОТА встреча") is Category.WORK
    assert detect_category("работа встреча") is Category.WORK


def test_category_first_match_wins() -> None:
    # "дом" (home) is checked before "работ" (work)
    assert detect_category("работа из дома") is Category.HOME
    assert detect_category("ужин с друзьями") is Category.CASUAL
    assert detect_category("что-то ещё") is Category.CASUAL


def test_category_labels_and_colors() -> None:
    assert parse_category(" Sport ") is Category.SPORT
    assert parse_category("leisure") is None
    assert parse_category(None) is None
    assert color_for(Category.IMPORTANT) == "11"
    assert color_for(Category.CASUAL) == "7"
