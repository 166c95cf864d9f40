# apps/core/tests.py

import json as _json
from datetime import date, timedelta
from unittest.mock import patch

import requests
from django.test import SimpleTestCase, override_settings

from apps.core.exceptions import AnalysisError, ExtractionError
from apps.core.services import edital_analyzer as ea
from apps.core.services import llm_service as llm

EXAM_DATE = date.today() + timedelta(days=30)


# -----------------------------------------------------------
# Fakes para simular respostas da API do modelo de linguagem
# -----------------------------------------------------------

class FakeResponseOK:
    status_code = 200
    reason = "OK"

    def __init__(self, content="CONTEUDO_OK"):
        self.content = content

    def raise_for_status(self):
        return

    def json(self):
        return {"choices": [{"message": {"content": self.content}}]}


class FakeResponseBadJSON:
    status_code = 200
    reason = "OK"

    def raise_for_status(self):
        return

    def json(self):
        raise ValueError("No JSON object could be decoded")


class FakeResponseHTTPError:
    status_code = 500
    reason = "Internal Server Error"

    def raise_for_status(self):
        raise requests.HTTPError("500 Server Error")

    def json(self):
        return {}


VALID_ANALYSIS = {
    "subjects": ["Português", "Direito do Trabalho"],
    "topics": {
        "Português": ["Gramática", "Interpretação de textos"],
        "Direito do Trabalho": ["CLT", "Contrato de trabalho"],
    },
    "priority": ["Direito do Trabalho"],
    "hoursPerSubject": {"Português": 30, "Direito do Trabalho": 40},
    "weeklyPlan": {
        "Segunda": [{"subject": "Português", "topics": ["Gramática"], "hours": 2}],
        "Sábado": [{"subject": "Revisão Geral", "topics": ["revisão geral"], "hours": 4}],
    },
}


class EditalAnalyzerTests(SimpleTestCase):

    def test_baseline_subjects_always_present_without_duplicates(self):
        for filename in ["edital.pdf", "trt_2025.pdf", "TRF3_analista.PDF", "prefeitura_tecnico.pdf"]:
            subjects = ea.generate_basic_analysis(filename, EXAM_DATE)["subjects"]
            for baseline in ("Português", "Matemática", "Atualidades"):
                self.assertIn(baseline, subjects)
            self.assertEqual(len(subjects), len(set(subjects)))

    def test_trt_or_trabalho_adds_labor_law(self):
        for filename in ["trt.pdf", "EDITAL_TRT15.pdf", "ministerio_do_trabalho.pdf"]:
            subjects = ea.generate_basic_analysis(filename, EXAM_DATE)["subjects"]
            self.assertIn("Direito do Trabalho", subjects)

    def test_trt_rule_takes_precedence_over_tecnico(self):
        subjects = ea.generate_basic_analysis("trt_tecnico.pdf", EXAM_DATE)["subjects"]
        self.assertEqual(subjects, [
            "Português",
            "Matemática",
            "Atualidades",
            "Direito do Trabalho",
            "Direito Constitucional",
            "Direito Administrativo",
        ])
        self.assertNotIn("Informática", subjects)

    def test_federal_rule(self):
        subjects = ea.infer_subjects("concurso_federal.pdf")
        self.assertEqual(subjects[3:], ["Direito Constitucional", "Direito Administrativo", "Direito Civil"])

    def test_tecnico_matches_accented_filename(self):
        subjects = ea.infer_subjects("Edital Técnico Judiciário.pdf")
        self.assertEqual(subjects[3:], ["Informática", "Raciocínio Lógico"])

    def test_analista_rule(self):
        subjects = ea.infer_subjects("analista_tjsp.pdf")
        self.assertEqual(
            subjects[3:],
            ["Direito Constitucional", "Direito Administrativo", "Informática", "Raciocínio Lógico"],
        )

    def test_default_rule_when_nothing_matches(self):
        subjects = ea.infer_subjects("edital_2025.pdf")
        self.assertEqual(subjects[3:], ["Informática", "Raciocínio Lógico", "Direito Constitucional"])

    def test_unknown_subject_gets_generic_topics(self):
        analysis = ea.generate_basic_analysis("trt.pdf", EXAM_DATE)
        self.assertEqual(analysis["topics"]["Direito do Trabalho"], ["Conteúdo programático", "Exercícios práticos"])
        self.assertEqual(analysis["topics"]["Atualidades"], ["Conteúdo programático", "Exercícios práticos"])
        self.assertEqual(analysis["topics"]["Português"][0], "Interpretação de textos")

    def test_priority_and_hours(self):
        analysis = ea.generate_basic_analysis("trt.pdf", EXAM_DATE)
        self.assertEqual(analysis["priority"], ["Português", "Matemática", "Atualidades"])
        self.assertEqual(analysis["hours_per_subject"], {
            "Português": 25,
            "Matemática": 25,
            "Atualidades": 20,
            "Direito do Trabalho": 15,
            "Direito Constitucional": 15,
            "Direito Administrativo": 15,
        })

    def test_portugues_always_25_hours(self):
        for filename in ["a.pdf", "trt.pdf", "federal.pdf", "tecnico.pdf", "analista.pdf"]:
            self.assertEqual(ea.generate_basic_analysis(filename, EXAM_DATE)["hours_per_subject"]["Português"], 25)

    def test_weekly_plan_round_robin_and_weekend_blocks(self):
        plan = ea.generate_basic_analysis("trt.pdf", EXAM_DATE)["weekly_plan"]

        self.assertEqual(list(plan.keys()), ea.WEEK_DAYS)
        self.assertEqual(plan["Segunda"], [{
            "subject": "Português",
            "topics": ["Interpretação de textos", "Gramática"],
            "hours": 3,
        }])
        self.assertEqual(plan["Quarta"][0]["subject"], "Atualidades")
        self.assertEqual(plan["Sexta"][0]["subject"], "Direito Constitucional")
        self.assertEqual(plan["Sábado"], [{
            "subject": "Revisão Geral",
            "topics": ["Revisão das matérias da semana", "Resolução de exercícios"],
            "hours": 4,
        }])
        self.assertEqual(plan["Domingo"][0]["subject"], "Simulados")
        self.assertEqual(plan["Domingo"][0]["hours"], 3)

    def test_weekly_plan_uses_estudo_geral_when_topic_slice_is_empty(self):
        plan = ea.build_weekly_plan(["Português", "Matemática"], {"Português": ["Gramática"], "Matemática": []})
        # Segunda: Português, offset 0 -> ['Gramática']; Terça: Matemática sem tópicos
        self.assertEqual(plan["Segunda"][0]["topics"], ["Gramática"])
        self.assertEqual(plan["Terça"][0]["topics"], ["Estudo geral"])
        # Quarta: Português de novo, offset 1 -> lista vazia
        self.assertEqual(plan["Quarta"][0]["topics"], ["Estudo geral"])

    def test_describe_edital_filename(self):
        self.assertEqual(
            ea.describe_edital_filename("trt_tecnico.pdf"),
            "Edital de concurso público. Tribunal Regional do Trabalho. Cargo: Técnico.",
        )
        self.assertEqual(ea.describe_edital_filename("x.pdf"), "Edital de concurso público.")


@override_settings(LLM_API_KEY="test-key", LLM_API_URL="https://llm.example.com/v1/chat/completions", LLM_TIMEOUT=5)
class LLMServiceTests(SimpleTestCase):

    # --- Testes para _call_llm_api ---

    @patch("apps.core.services.llm_service.requests.post", return_value=FakeResponseOK())
    def test_call_llm_api_includes_response_format_and_timeout(self, mock_post):
        content = llm._call_llm_api([{"role": "user", "content": "oi"}], is_json_output=True)

        self.assertEqual(content, "CONTEUDO_OK")
        kwargs = mock_post.call_args.kwargs
        self.assertEqual(kwargs["json"]["response_format"], {"type": "json_object"})
        self.assertEqual(kwargs["timeout"], 5)
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer test-key")
        self.assertEqual(mock_post.call_args.args[0], "https://llm.example.com/v1/chat/completions")

    @patch("apps.core.services.llm_service.requests.post", return_value=FakeResponseBadJSON())
    def test_call_llm_api_invalid_json_raises_value_error(self, mock_post):
        with self.assertRaises(ValueError):
            llm._call_llm_api([{"role": "user", "content": "oi"}])

    # --- Testes para extract_text ---

    @patch("apps.core.services.llm_service.requests.post", return_value=FakeResponseOK("Texto do edital"))
    def test_extract_text_sends_base64_pdf(self, mock_post):
        text = llm.extract_text(b"%PDF-1.4 conteudo")

        self.assertEqual(text, "Texto do edital")
        content = mock_post.call_args.kwargs["json"]["messages"][0]["content"]
        self.assertTrue(content[1]["image_url"]["url"].startswith("data:application/pdf;base64,JVBERi0xLjQ"))

    @override_settings(LLM_API_KEY="")
    @patch("apps.core.services.llm_service.requests.post")
    def test_extract_text_without_api_key_fails_without_calling(self, mock_post):
        with self.assertRaises(ExtractionError):
            llm.extract_text(b"%PDF")
        mock_post.assert_not_called()

    @patch("apps.core.services.llm_service.requests.post", side_effect=requests.Timeout("boom"))
    def test_extract_text_timeout_raises_extraction_error(self, mock_post):
        with self.assertRaises(ExtractionError):
            llm.extract_text(b"%PDF")
        mock_post.assert_called_once()

    @patch("apps.core.services.llm_service.requests.post", return_value=FakeResponseOK("   "))
    def test_extract_text_empty_content_raises(self, mock_post):
        with self.assertRaises(ExtractionError):
            llm.extract_text(b"%PDF")

    @patch("apps.core.services.llm_service.requests.post", return_value=FakeResponseHTTPError())
    def test_extract_text_http_error_raises(self, mock_post):
        with self.assertRaises(ExtractionError):
            llm.extract_text(b"%PDF")

    # --- Testes para analyze_edital ---

    @patch("apps.core.services.llm_service.requests.post")
    def test_analyze_edital_success_normalizes_keys(self, mock_post):
        mock_post.return_value = FakeResponseOK(_json.dumps(VALID_ANALYSIS))

        analysis = llm.analyze_edital("texto", EXAM_DATE)

        self.assertEqual(analysis["subjects"], ["Português", "Direito do Trabalho"])
        self.assertEqual(analysis["hours_per_subject"], {"Português": 30, "Direito do Trabalho": 40})
        self.assertEqual(analysis["priority"], ["Direito do Trabalho"])
        self.assertIn("Segunda", analysis["weekly_plan"])
        payload = mock_post.call_args.kwargs["json"]
        self.assertEqual(payload["temperature"], 0.3)
        self.assertIn(EXAM_DATE.isoformat(), payload["messages"][1]["content"])

    @patch("apps.core.services.llm_service.requests.post", return_value=FakeResponseOK("JSON inválido"))
    def test_analyze_edital_unparseable_raises(self, mock_post):
        with self.assertRaises(AnalysisError):
            llm.analyze_edital("texto", EXAM_DATE)

    @patch("apps.core.services.llm_service.requests.post", side_effect=requests.ConnectionError("sem rede"))
    def test_analyze_edital_network_error_raises(self, mock_post):
        with self.assertRaises(AnalysisError):
            llm.analyze_edital("texto", EXAM_DATE)

    @patch("apps.core.services.llm_service.requests.post")
    def test_analyze_edital_empty_subjects_raises(self, mock_post):
        mock_post.return_value = FakeResponseOK(_json.dumps(dict(VALID_ANALYSIS, subjects=[])))
        with self.assertRaises(AnalysisError):
            llm.analyze_edital("texto", EXAM_DATE)

    # --- Testes para validate_analysis ---

    def test_validate_analysis_defaults_priority_to_first_three_subjects(self):
        data = dict(VALID_ANALYSIS)
        data.pop("priority")
        data["subjects"] = ["A", "B", "C", "D"]
        self.assertEqual(llm.validate_analysis(data)["priority"], ["A", "B", "C"])

    def test_validate_analysis_rejects_malformed_structures(self):
        invalid_payloads = [
            [],
            dict(VALID_ANALYSIS, subjects="Português"),
            dict(VALID_ANALYSIS, topics={"Português": "Gramática"}),
            dict(VALID_ANALYSIS, hoursPerSubject={"Português": "dez"}),
            dict(VALID_ANALYSIS, hoursPerSubject={"Português": -1}),
            {k: v for k, v in VALID_ANALYSIS.items() if k != "weeklyPlan"},
            dict(VALID_ANALYSIS, weeklyPlan={"Segunda": {"subject": "Português"}}),
            dict(VALID_ANALYSIS, weeklyPlan={"Segunda": [{"subject": "Português", "topics": [], "hours": "2"}]}),
        ]
        for payload in invalid_payloads:
            with self.assertRaises(AnalysisError):
                llm.validate_analysis(payload)

    def test_validate_analysis_rejects_values_that_cannot_become_a_schedule(self):
        segunda = VALID_ANALYSIS["weeklyPlan"]["Segunda"][0]
        invalid_payloads = [
            dict(VALID_ANALYSIS, hoursPerSubject={"Português": float("inf")}),
            dict(VALID_ANALYSIS, hoursPerSubject={"Português": float("nan")}),
            dict(VALID_ANALYSIS, subjects=["Português", "  "]),
            dict(VALID_ANALYSIS, weeklyPlan={}),
            dict(VALID_ANALYSIS, weeklyPlan={"Segunda": [], "Terça": []}),
            dict(VALID_ANALYSIS, weeklyPlan={"Segunda": [dict(segunda, hours=-2)]}),
            dict(VALID_ANALYSIS, weeklyPlan={"Segunda": [dict(segunda, hours=float("inf"))]}),
            dict(VALID_ANALYSIS, weeklyPlan={"Segunda": [dict(segunda, subject="")]}),
        ]
        for payload in invalid_payloads:
            with self.assertRaises(AnalysisError):
                llm.validate_analysis(payload)

    @patch("apps.core.services.llm_service.requests.post")
    def test_analyze_edital_infinity_in_json_raises(self, mock_post):
        content = _json.dumps(VALID_ANALYSIS, ensure_ascii=False).replace('"Português": 30', '"Português": Infinity')
        self.assertIn("Infinity", content)
        mock_post.return_value = FakeResponseOK(content)
        with self.assertRaises(AnalysisError):
            llm.analyze_edital("texto", EXAM_DATE)
