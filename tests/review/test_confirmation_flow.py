import unittest
from unittest.mock import Mock, patch

from commit_suggester.classify.change_classifier import classify_change
from commit_suggester.classify.suggestion_model import CommitSuggestion
from commit_suggester.diff.intake import ChangeStats, ChangeSummary
from commit_suggester.llm.anthropic_client import AnthropicClient, GenerativeUnavailable
from commit_suggester.llm.suggestion_adapter import GenerativeSuggestionAdapter
from commit_suggester.review.confirmation_flow import ConfirmationFlow, FlowState


SUMMARY = ChangeSummary(
    files=("src/UserAuth.ts",),
    diff_text="new file mode 100644\n+export default {};\n",
    stats=ChangeStats(additions=40, deletions=0),
)
HEURISTIC = CommitSuggestion(type="feat", scope="user-auth", message="add UserAuth")
GENERATED = CommitSuggestion(type="feat", scope="auth", message="add user authentication")


class ScriptedPrompt:
    """Answer prompts from a fixed list, recording the questions asked."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.questions = []

    def __call__(self, text, default="", show_default=False):
        self.questions.append(text)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {text}")
        answer = self.answers.pop(0)
        return answer if answer else default


def make_flow(*answers, adapter=None, auto_accept=False):
    prompt = ScriptedPrompt(*answers)
    lines = []
    flow = ConfirmationFlow(adapter=adapter, prompt=prompt, echo=lines.append, auto_accept=auto_accept)
    return flow, prompt, lines


def generating_adapter(suggestion=GENERATED):
    adapter = Mock()
    adapter.suggest.return_value = suggestion
    return adapter


class TestHeuristicMode(unittest.TestCase):
    def test_empty_answers_reproduce_the_heuristic(self) -> None:
        flow, prompt, _ = make_flow("", "", "", "")
        outcome = flow.run(SUMMARY)
        self.assertEqual(outcome.state, FlowState.ACCEPTED)
        self.assertEqual(outcome.suggestion, HEURISTIC)
        self.assertFalse(outcome.generated)
        self.assertEqual(len(prompt.questions), 4)
        self.assertIn("(suggested: user-auth)", prompt.questions[1])

    def test_overrides_replace_fields(self) -> None:
        flow, _, lines = make_flow("fix", "core", "handle errors", "y")
        outcome = flow.run(SUMMARY)
        self.assertEqual(outcome.suggestion, CommitSuggestion("fix", "core", "handle errors"))
        self.assertIn("📋 Preview: fix(core): handle errors", lines)

    def test_non_standard_type_warns_but_is_kept(self) -> None:
        flow, _, lines = make_flow("wip", "", "", "")
        outcome = flow.run(SUMMARY)
        self.assertTrue(outcome.accepted)
        self.assertEqual(outcome.suggestion.type, "wip")
        self.assertTrue(any("not a standard conventional commit type" in line for line in lines))

    def test_heuristic_message_is_shown(self) -> None:
        flow, _, lines = make_flow("", "", "", "")
        flow.run(SUMMARY)
        self.assertIn("Suggested message: add UserAuth", lines)

    def test_decline_at_confirm_cancels(self) -> None:
        for answer in ("n", "N", " n "):
            with self.subTest(answer=answer):
                flow, _, _ = make_flow("", "", "", answer)
                outcome = flow.run(SUMMARY)
                self.assertEqual(outcome.state, FlowState.CANCELLED)
                self.assertIsNone(outcome.suggestion)
                self.assertFalse(outcome.accepted)

    def test_adapter_unused_without_generative_mode(self) -> None:
        adapter = generating_adapter()
        flow, _, _ = make_flow("", "", "", "", adapter=adapter)
        flow.run(SUMMARY, use_generative=False)
        adapter.suggest.assert_not_called()

    def test_producer_suggestion_is_not_modified(self) -> None:
        flow, _, _ = make_flow("docs", "readme", "rewrite intro", "")
        flow.run(SUMMARY)
        self.assertEqual(flow.heuristic, classify_change(SUMMARY))
        self.assertEqual(flow.heuristic, HEURISTIC)


class TestGenerativeMode(unittest.TestCase):
    def test_accept_on_empty_answer(self) -> None:
        adapter = generating_adapter()
        flow, prompt, lines = make_flow("", adapter=adapter)
        outcome = flow.run(SUMMARY, use_generative=True)
        self.assertEqual(outcome.state, FlowState.ACCEPTED)
        self.assertEqual(outcome.suggestion, GENERATED)
        self.assertTrue(outcome.generated)
        self.assertEqual(len(prompt.questions), 1)
        self.assertIn("✨ Suggested: feat(auth): add user authentication", lines)
        adapter.suggest.assert_called_once_with(SUMMARY)

    def test_any_answer_but_n_accepts(self) -> None:
        for answer in ("y", "yes", "whatever"):
            with self.subTest(answer=answer):
                flow, _, _ = make_flow(answer, adapter=generating_adapter())
                self.assertEqual(flow.run(SUMMARY, use_generative=True).suggestion, GENERATED)

    def test_decline_then_keep_everything(self) -> None:
        flow, prompt, _ = make_flow("n", "", "", "", "", adapter=generating_adapter())
        outcome = flow.run(SUMMARY, use_generative=True)
        self.assertEqual(outcome.state, FlowState.ACCEPTED)
        self.assertEqual(outcome.suggestion, GENERATED)
        self.assertEqual(len(prompt.questions), 5)

    def test_decline_then_override_message(self) -> None:
        flow, _, _ = make_flow("n", "", "", "add oauth login", "", adapter=generating_adapter())
        outcome = flow.run(SUMMARY, use_generative=True)
        self.assertEqual(outcome.suggestion, CommitSuggestion("feat", "auth", "add oauth login"))

    def test_decline_then_cancel(self) -> None:
        flow, _, _ = make_flow("n", "", "", "", "n", adapter=generating_adapter())
        self.assertEqual(flow.run(SUMMARY, use_generative=True).state, FlowState.CANCELLED)

    def test_provider_failure_falls_back_to_heuristic(self) -> None:
        adapter = Mock()
        adapter.suggest.side_effect = GenerativeUnavailable("ANTHROPIC_API_KEY not found")
        flow, prompt, lines = make_flow("", "", "", "", adapter=adapter)
        outcome = flow.run(SUMMARY, use_generative=True)
        self.assertEqual(outcome.suggestion, HEURISTIC)
        self.assertFalse(outcome.generated)
        self.assertEqual(len(prompt.questions), 4)
        self.assertTrue(any("AI generation failed" in line for line in lines))

    def test_unusable_timeout_falls_back_to_heuristic(self) -> None:
        client = AnthropicClient(api_key="sk-test", model="m", request_timeout=0.0)
        error = ValueError("Attempted to set connect timeout to 0.0")
        flow, _, lines = make_flow("", "", "", "", adapter=GenerativeSuggestionAdapter(client))
        with patch("requests.post", Mock(side_effect=error)):
            outcome = flow.run(SUMMARY, use_generative=True)
        self.assertEqual(outcome.suggestion, HEURISTIC)
        self.assertTrue(any("AI generation failed" in line for line in lines))

    def test_missing_adapter_falls_back_to_heuristic(self) -> None:
        flow, _, lines = make_flow("", "", "", "")
        outcome = flow.run(SUMMARY, use_generative=True)
        self.assertEqual(outcome.suggestion, HEURISTIC)
        self.assertIn("Falling back to local suggestions", lines)


class TestAutoAccept(unittest.TestCase):
    def test_heuristic_accepted_without_prompts(self) -> None:
        flow, prompt, _ = make_flow(auto_accept=True)
        outcome = flow.run(SUMMARY)
        self.assertEqual(outcome.suggestion, HEURISTIC)
        self.assertEqual(prompt.questions, [])

    def test_generated_accepted_without_prompts(self) -> None:
        flow, prompt, _ = make_flow(adapter=generating_adapter(), auto_accept=True)
        self.assertEqual(flow.run(SUMMARY, use_generative=True).suggestion, GENERATED)
        self.assertEqual(prompt.questions, [])


if __name__ == "__main__":
    unittest.main()
