from health_companion.application.services import question_bank


def test_symptom_questions_come_before_generic_ones():
    ids = [q["id"] for q in question_bank.questions_for("fever")]
    assert ids == ["fever_temp", "fever_chills", "general_health", "medications"]


def test_unknown_symptom_gets_generic_questions_only():
    assert question_bank.next_question("insomnia", 1)["id"] == "general_health"
    assert question_bank.next_question("insomnia", 2)["id"] == "medications"
    assert question_bank.next_question("insomnia", 3) is None


def test_next_question_is_one_based_and_bounded():
    assert question_bank.next_question("cough", 1)["id"] == "cough_type"
    assert question_bank.next_question("cough", 4)["id"] == "medications"
    assert question_bank.next_question("cough", 5) is None
    assert question_bank.next_question("cough", 0) is None


def test_returned_question_is_a_copy():
    q = question_bank.next_question("headache", 1)
    q["id"] = "changed"
    assert question_bank.next_question("headache", 1)["id"] == "headache_location"
