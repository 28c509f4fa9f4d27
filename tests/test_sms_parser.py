from components.sms.parser import find_last4, normalize_text, parse_balances


def test_masked_card_with_grouped_amount():
    text = "بانک ملی\nموجودی کارت ****1234: 2,500,000 ریال"
    assert parse_balances(text) == {"1234": 2500000}


def test_persian_digits_are_normalized():
    assert parse_balances("کارت ۵۶۷۸ موجودی: ۱۰۰۰۰۰") == {"5678": 100000}


def test_two_messages_for_two_cards():
    text = (
        "بانک ملت\n"
        "موجودی کارت ****1111: 1,200,000\n"
        "بانک ملی\n"
        "کارت ۲۲۲۲ مانده ۳۰۰٬۰۰۰ ریال"
    )
    assert parse_balances(text) == {"1111": 1200000, "2222": 300000}


def test_later_message_wins_for_same_card():
    text = "Balance of card ****4321: 900,000\nBalance of card ****4321: 750,000"
    assert parse_balances(text) == {"4321": 750000}


def test_full_card_number_with_masked_middle():
    text = "6037-****-****-4321 مانده 5,000,000"
    assert parse_balances(text) == {"4321": 5000000}


def test_whole_text_fallback_when_no_line_has_both():
    text = "مانده حساب\nکارت ****9999\n12,500,000"
    assert parse_balances(text) == {"9999": 12500000}


def test_no_keyword_or_no_card():
    assert parse_balances("") == {}
    assert parse_balances("کارت ****1234 برداشت 50,000") == {}
    assert parse_balances("موجودی 50,000") == {}
    assert parse_balances("سلام") == {}


def test_normalize_keeps_plain_spaces_and_drops_zwnj():
    assert normalize_text("مانده\u200cی 1,234,567 ریال") == "ماندهی 1234567 ریال"


def test_find_last4_pattern_order():
    assert find_last4("****8765") == "8765"
    assert find_last4("6219 8610 2233 4455") == "4455"
    assert find_last4("کارت شماره ***1357") == "1357"
    assert find_last4("no card here") is None
