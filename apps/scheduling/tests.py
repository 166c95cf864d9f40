# apps/scheduling/tests.py

import shutil
import tempfile
from datetime import date, timedelta
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.test import APITestCase

from apps.core.exceptions import AnalysisError
from apps.core.services import edital_analyzer
from apps.documents.models import PdfDocument
from apps.scheduling import services
from apps.scheduling.models import StudySchedule, StudySession

User = get_user_model()

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF"

MEDIA_ROOT = tempfile.mkdtemp()


def make_analysis(hours_per_subject):
    subjects = list(hours_per_subject)
    return {
        "subjects": subjects,
        "topics": {subject: ["Tópico"] for subject in subjects},
        "priority": subjects[:3],
        "hours_per_subject": hours_per_subject,
        "weekly_plan": {"Segunda": [{"subject": subjects[0], "topics": ["Tópico"], "hours": 3}]},
    }


class SynthesizeScheduleTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user("u", password="p")
        self.today = date(2025, 8, 1)

    def test_past_or_same_day_exam_is_rejected(self):
        analysis = make_analysis({"Português": 25})
        for exam_date in (self.today, self.today - timedelta(days=1)):
            with self.assertRaises(ValidationError):
                services.synthesize_schedule(self.user, analysis, exam_date, today=self.today)
        self.assertFalse(StudySchedule.objects.exists())

    def test_hours_per_day_is_capped_at_twelve(self):
        # 200h em 10 dias -> ceil(20) = 20 -> limitado a 12
        analysis = make_analysis({"Português": 100, "Matemática": 100})
        schedule, summary = services.synthesize_schedule(
            self.user, analysis, self.today + timedelta(days=10), today=self.today,
        )
        self.assertEqual(schedule.hours_per_day, 12)
        self.assertEqual(summary["total_estimated_hours"], 200)
        self.assertEqual(summary["days_until_exam"], 10)

    def test_hours_per_day_rounds_up(self):
        analysis = make_analysis({"Português": 25, "Matemática": 25, "Atualidades": 20})
        schedule, _ = services.synthesize_schedule(
            self.user, analysis, self.today + timedelta(days=30), today=self.today,
        )
        # 70h / 30 dias = 2.33 -> 3
        self.assertEqual(schedule.hours_per_day, 3)

    def test_hours_per_day_is_at_least_one(self):
        analysis = make_analysis({"Português": 0})
        schedule, _ = services.synthesize_schedule(
            self.user, analysis, self.today + timedelta(days=90), today=self.today,
        )
        self.assertEqual(schedule.hours_per_day, 1)

    def test_calculate_hours_per_day_bounds(self):
        for total in (0, 1, 50, 200, 10_000):
            for days in (1, 2, 7, 30, 365):
                hours = services.calculate_hours_per_day(total, days)
                self.assertGreaterEqual(hours, 1)
                self.assertLessEqual(hours, 12)

    def test_persisted_fields(self):
        analysis = edital_analyzer.generate_basic_analysis("trt.pdf", self.today + timedelta(days=30))
        schedule, summary = services.synthesize_schedule(
            self.user, analysis, self.today + timedelta(days=30), today=self.today,
        )
        schedule.refresh_from_db()

        self.assertTrue(schedule.is_ai_generated)
        self.assertEqual(schedule.start_date, self.today)
        self.assertEqual(schedule.end_date, self.today + timedelta(days=30))
        self.assertEqual(schedule.exam_date, self.today + timedelta(days=30))
        self.assertEqual(schedule.subjects, analysis["subjects"])
        self.assertEqual(schedule.weekly_plan, analysis["weekly_plan"])
        self.assertEqual(schedule.title, f"Cronograma - {', '.join(analysis['subjects'])}")
        self.assertEqual(
            schedule.description,
            "Cronograma gerado automaticamente baseado no edital. 30 dias até o concurso.",
        )
        self.assertEqual(summary["subjects"], analysis["subjects"])
        self.assertEqual(summary["topics"], analysis["topics"])

    def test_long_default_title_is_truncated(self):
        analysis = make_analysis({f"Matéria com um nome bem comprido {i}": 10 for i in range(20)})
        schedule, _ = services.synthesize_schedule(
            self.user, analysis, self.today + timedelta(days=30), today=self.today,
        )
        self.assertEqual(len(schedule.title), 200)

    def test_schedule_without_weekly_plan_is_not_persisted(self):
        analysis = dict(make_analysis({"Português": 25}), weekly_plan={})
        with self.assertRaises(DjangoValidationError):
            services.synthesize_schedule(
                self.user, analysis, self.today + timedelta(days=30), today=self.today,
            )
        self.assertFalse(StudySchedule.objects.exists())


class ComputeUserStatsTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user("stats", password="p")
        self.now = timezone.now()
        self.today = timezone.localdate(self.now)

    def _session(self, days_ago, duration=30, user=None):
        return StudySession.objects.create(
            user=user or self.user,
            subject="Português",
            duration=duration,
            completed_at=self.now - timedelta(days=days_ago),
        )

    def test_no_sessions(self):
        self.assertEqual(
            services.compute_user_stats(self.user, today=self.today),
            {"total_hours": 0, "completed_sessions": 0, "current_streak": 0},
        )

    def test_streak_counts_consecutive_days_until_gap(self):
        for days_ago in (0, 1, 2, 4, 5):
            self._session(days_ago)
        self._session(0)  # duas sessões no mesmo dia contam uma vez

        stats = services.compute_user_stats(self.user, today=self.today)
        self.assertEqual(stats["current_streak"], 3)
        self.assertEqual(stats["completed_sessions"], 6)

    def test_streak_is_zero_without_session_today(self):
        self._session(1)
        self._session(2)
        self.assertEqual(services.compute_user_stats(self.user, today=self.today)["current_streak"], 0)

    def test_streak_is_capped_at_thirty(self):
        for days_ago in range(40):
            self._session(days_ago)
        self.assertEqual(services.compute_user_stats(self.user, today=self.today)["current_streak"], 30)

    def test_total_hours_rounds_half_up(self):
        self._session(0, duration=60)
        self._session(0, duration=30)
        # 90 min = 1.5h -> 2
        self.assertEqual(services.compute_user_stats(self.user, today=self.today)["total_hours"], 2)

    def test_other_users_sessions_are_ignored(self):
        other = User.objects.create_user("outro", password="p")
        self._session(0, duration=600, user=other)
        self.assertEqual(services.compute_user_stats(self.user, today=self.today)["completed_sessions"], 0)


class StudyScheduleAPITests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user("u", password="p")
        self.client.force_authenticate(self.user)
        self.other = User.objects.create_user("v", password="p")
        self.payload = {
            "title": "Cronograma TRT",
            "description": "Foco em Direito do Trabalho",
            "subjects": ["Português", "Direito do Trabalho"],
            "start_date": "2025-08-01",
            "end_date": "2025-11-30",
            "hours_per_day": 4,
        }

    def test_create_then_retrieve_round_trip(self):
        create = self.client.post(reverse("studyschedule-list"), self.payload, format="json")
        self.assertEqual(create.status_code, status.HTTP_201_CREATED)

        detail = self.client.get(reverse("studyschedule-detail", args=[create.data["id"]]))
        self.assertEqual(detail.status_code, status.HTTP_200_OK)
        self.assertEqual(detail.data, create.data)
        for field, value in self.payload.items():
            self.assertEqual(detail.data[field], value)
        self.assertFalse(detail.data["is_ai_generated"])
        self.assertIsNone(detail.data["weekly_plan"])
        self.assertIsNone(detail.data["exam_date"])
        self.assertEqual(StudySchedule.objects.get(id=create.data["id"]).user, self.user)

    def test_empty_subjects_rejected(self):
        resp = self.client.post(reverse("studyschedule-list"), dict(self.payload, subjects=[]), format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("subjects", resp.data)

    def test_hours_per_day_out_of_range_rejected(self):
        for hours in (0, 25):
            resp = self.client.post(
                reverse("studyschedule-list"), dict(self.payload, hours_per_day=hours), format="json",
            )
            self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertIn("hours_per_day", resp.data)

    def test_end_before_start_rejected(self):
        resp = self.client.post(
            reverse("studyschedule-list"), dict(self.payload, end_date="2025-07-01"), format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("end_date", resp.data)

    def test_is_ai_generated_cannot_be_set_by_client(self):
        resp = self.client.post(
            reverse("studyschedule-list"), dict(self.payload, is_ai_generated=True), format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertFalse(resp.data["is_ai_generated"])

    def test_list_only_returns_own_schedules(self):
        own = StudySchedule.objects.create(
            user=self.user, title="Meu", subjects=["Português"],
            start_date=date(2025, 1, 1), end_date=date(2025, 2, 1), hours_per_day=2,
        )
        StudySchedule.objects.create(
            user=self.other, title="Alheio", subjects=["Português"],
            start_date=date(2025, 1, 1), end_date=date(2025, 2, 1), hours_per_day=2,
        )
        resp = self.client.get(reverse("studyschedule-list"))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([item["id"] for item in resp.data], [own.id])

    def test_other_users_schedule_is_not_found(self):
        alheio = StudySchedule.objects.create(
            user=self.other, title="Alheio", subjects=["Português"],
            start_date=date(2025, 1, 1), end_date=date(2025, 2, 1), hours_per_day=2,
        )
        url = reverse("studyschedule-detail", args=[alheio.id])
        self.assertEqual(self.client.get(url).status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(StudySchedule.objects.filter(id=alheio.id).exists())

    def test_update_and_delete(self):
        create = self.client.post(reverse("studyschedule-list"), self.payload, format="json")
        url = reverse("studyschedule-detail", args=[create.data["id"]])

        patch_resp = self.client.patch(url, {"hours_per_day": 6}, format="json")
        self.assertEqual(patch_resp.status_code, status.HTTP_200_OK)
        self.assertEqual(patch_resp.data["hours_per_day"], 6)

        delete = self.client.delete(url)
        self.assertEqual(delete.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(StudySchedule.objects.filter(id=create.data["id"]).exists())

    def test_ai_generated_schedule_keeps_weekly_plan(self):
        schedule = StudySchedule.objects.create(
            user=self.user, title="IA", subjects=["Português"],
            start_date=date(2025, 1, 1), end_date=date(2025, 2, 1), hours_per_day=2,
            exam_date=date(2025, 2, 1), is_ai_generated=True,
            weekly_plan={"Segunda": [{"subject": "Português", "topics": [], "hours": 3}]},
        )
        resp = self.client.patch(
            reverse("studyschedule-detail", args=[schedule.id]), {"weekly_plan": None}, format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_weekly_plan_shape_is_validated(self):
        resp = self.client.post(
            reverse("studyschedule-list"),
            dict(self.payload, weekly_plan={"Segunda": [{"subject": "Português", "hours": "muitas"}]}),
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("weekly_plan", resp.data)

    def test_cannot_link_other_users_pdf(self):
        pdf = PdfDocument.objects.create(user=self.other, title="Edital", filename="edital.pdf")
        resp = self.client.post(
            reverse("studyschedule-list"), dict(self.payload, edital_pdf=pdf.id), format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("edital_pdf", resp.data)

    def test_deleting_pdf_nulls_out_schedule_reference(self):
        pdf = PdfDocument.objects.create(user=self.user, title="Edital", filename="edital.pdf")
        resp = self.client.post(
            reverse("studyschedule-list"), dict(self.payload, edital_pdf=pdf.id), format="json",
        )
        self.assertEqual(resp.data["edital_pdf"], pdf.id)

        self.client.delete(reverse("pdfdocument-detail", args=[pdf.id]))

        schedule = StudySchedule.objects.get(id=resp.data["id"])
        self.assertIsNone(schedule.edital_pdf)


class StudySessionAPITests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user("s1", password="p")
        self.client.force_authenticate(self.user)
        self.other = User.objects.create_user("s2", password="p")
        self.schedule = StudySchedule.objects.create(
            user=self.user, title="Meu", subjects=["Português"],
            start_date=date(2025, 1, 1), end_date=date(2025, 2, 1), hours_per_day=2,
        )

    def test_create_session_sets_user_and_completed_at(self):
        resp = self.client.post(
            reverse("studysession-list"),
            {"subject": "Português", "duration": 45, "schedule": self.schedule.id},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        session = StudySession.objects.get(id=resp.data["id"])
        self.assertEqual(session.user, self.user)
        self.assertIsNotNone(resp.data["completed_at"])

    def test_duration_must_be_positive(self):
        resp = self.client.post(
            reverse("studysession-list"), {"subject": "Português", "duration": 0}, format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("duration", resp.data)

    def test_cannot_log_session_on_other_users_schedule(self):
        alheio = StudySchedule.objects.create(
            user=self.other, title="Alheio", subjects=["Português"],
            start_date=date(2025, 1, 1), end_date=date(2025, 2, 1), hours_per_day=2,
        )
        resp = self.client.post(
            reverse("studysession-list"),
            {"subject": "Português", "duration": 30, "schedule": alheio.id},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("Você só pode registrar sessões", str(resp.data))

    def test_list_returns_most_recent_with_limit(self):
        now = timezone.now()
        for hours_ago in range(12):
            StudySession.objects.create(
                user=self.user, subject=f"S{hours_ago}", duration=10,
                completed_at=now - timedelta(hours=hours_ago),
            )
        StudySession.objects.create(user=self.other, subject="Alheia", duration=10)

        default = self.client.get(reverse("studysession-list"))
        self.assertEqual(len(default.data), 10)
        self.assertEqual(default.data[0]["subject"], "S0")

        limited = self.client.get(reverse("studysession-list"), {"limit": 3})
        self.assertEqual([item["subject"] for item in limited.data], ["S0", "S1", "S2"])

    def test_invalid_limit_returns_400(self):
        resp = self.client.get(reverse("studysession-list"), {"limit": "abc"})
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_sessions_are_immutable(self):
        session = StudySession.objects.create(user=self.user, subject="Português", duration=10)
        url = reverse("studysession-detail", args=[session.id])
        self.assertEqual(self.client.patch(url, {"duration": 99}, format="json").status_code,
                         status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    def test_deleting_schedule_keeps_sessions(self):
        session = StudySession.objects.create(
            user=self.user, subject="Português", duration=10, schedule=self.schedule,
        )
        self.client.delete(reverse("studyschedule-detail", args=[self.schedule.id]))
        session.refresh_from_db()
        self.assertIsNone(session.schedule)

    def test_statistics_endpoint(self):
        StudySession.objects.create(user=self.user, subject="Português", duration=120)
        resp = self.client.get(reverse("study-statistics"))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data, {"total_hours": 2, "completed_sessions": 1, "current_streak": 1})


@override_settings(MEDIA_ROOT=MEDIA_ROOT, LLM_API_KEY="")
class AIGenerateScheduleAPITests(APITestCase):
    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self):
        self.user = User.objects.create_user("ia", password="p")
        self.client.force_authenticate(self.user)
        self.url = reverse("studyschedule-ai-generate")
        self.exam_date = (timezone.localdate() + timedelta(days=30)).isoformat()

    def _pdf(self, name="trt_tecnico.pdf", content=PDF_BYTES, content_type="application/pdf"):
        return SimpleUploadedFile(name, content, content_type=content_type)

    def test_missing_pdf_returns_400(self):
        resp = self.client.post(self.url, {"exam_date": self.exam_date}, format="multipart")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("PDF do edital é obrigatório", str(resp.data))

    def test_missing_exam_date_returns_400(self):
        resp = self.client.post(self.url, {"edital_pdf": self._pdf()}, format="multipart")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("Data do concurso é obrigatória", str(resp.data))

    def test_past_exam_date_returns_400(self):
        yesterday = (timezone.localdate() - timedelta(days=1)).isoformat()
        resp = self.client.post(
            self.url, {"edital_pdf": self._pdf(), "exam_date": yesterday}, format="multipart",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("Data do concurso deve ser futura", str(resp.data))
        self.assertFalse(PdfDocument.objects.exists())

    def test_non_pdf_returns_400(self):
        resp = self.client.post(
            self.url,
            {"edital_pdf": self._pdf("edital.txt", b"texto", "text/plain"), "exam_date": self.exam_date},
            format="multipart",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

        fake = self.client.post(
            self.url,
            {"edital_pdf": self._pdf("edital.pdf", b"not really a pdf"), "exam_date": self.exam_date},
            format="multipart",
        )
        self.assertEqual(fake.status_code, status.HTTP_400_BAD_REQUEST)

    def test_falls_back_to_heuristic_without_llm(self):
        resp = self.client.post(
            self.url, {"edital_pdf": self._pdf(), "exam_date": self.exam_date}, format="multipart",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)

        schedule = resp.data["schedule"]
        analysis = resp.data["analysis"]
        self.assertTrue(schedule["is_ai_generated"])
        self.assertIn("Direito do Trabalho", schedule["subjects"])
        self.assertEqual(schedule["hours_per_day"], 4)  # 115h / 30 dias
        self.assertEqual(analysis["source"], "heuristica")
        self.assertEqual(analysis["days_until_exam"], 30)
        self.assertEqual(analysis["total_estimated_hours"], 115)
        self.assertEqual(analysis["edital_pdf"]["filename"], "trt_tecnico.pdf")
        self.assertEqual(analysis["edital_pdf"]["title"], "Edital - trt_tecnico.pdf")
        self.assertEqual(schedule["edital_pdf"], analysis["edital_pdf"]["id"])
        self.assertIn("Tribunal Regional do Trabalho", schedule["description"])

    @patch("apps.scheduling.services.llm_service.analyze_edital")
    @patch("apps.scheduling.services.llm_service.extract_text", return_value="Texto do edital")
    def test_uses_llm_analysis_when_available(self, mock_extract, mock_analyze):
        mock_analyze.return_value = {
            "subjects": ["Legislação Específica"],
            "topics": {"Legislação Específica": ["Regimento interno"]},
            "priority": ["Legislação Específica"],
            "hours_per_subject": {"Legislação Específica": 60},
            "weekly_plan": {"Segunda": [{"subject": "Legislação Específica", "topics": ["Regimento interno"], "hours": 2}]},
        }
        resp = self.client.post(
            self.url,
            {"edital_pdf": self._pdf(), "exam_date": self.exam_date, "title": "Meu cronograma"},
            format="multipart",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["analysis"]["source"], "ia")
        self.assertEqual(resp.data["schedule"]["subjects"], ["Legislação Específica"])
        self.assertEqual(resp.data["schedule"]["title"], "Meu cronograma")
        self.assertEqual(resp.data["schedule"]["hours_per_day"], 2)
        self.assertEqual(resp.data["analysis"]["edital_pdf"]["title"], "Meu cronograma")
        mock_extract.assert_called_once_with(PDF_BYTES)

    @patch("apps.scheduling.services.llm_service.analyze_edital", side_effect=AnalysisError("malformado"))
    @patch("apps.scheduling.services.llm_service.extract_text", return_value="Texto do edital")
    def test_invalid_llm_analysis_falls_back(self, mock_extract, mock_analyze):
        resp = self.client.post(
            self.url, {"edital_pdf": self._pdf(), "exam_date": self.exam_date}, format="multipart",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["analysis"]["source"], "heuristica")
        self.assertNotIn("malformado", str(resp.data))

    @patch("apps.scheduling.services.synthesize_schedule", side_effect=RuntimeError("boom"))
    def test_unexpected_failure_returns_500_and_persists_nothing(self, _mock):
        resp = self.client.post(
            self.url, {"edital_pdf": self._pdf(), "exam_date": self.exam_date}, format="multipart",
        )
        self.assertEqual(resp.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertIn("Erro ao gerar cronograma com IA", str(resp.data))
        self.assertFalse(PdfDocument.objects.exists())
        self.assertFalse(StudySchedule.objects.exists())
