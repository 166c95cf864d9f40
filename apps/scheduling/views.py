# apps/scheduling/views.py

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from . import services
from .models import StudySchedule, StudySession
from .serializers import (
    AIScheduleRequestSerializer,
    AIScheduleResponseSerializer,
    StudyScheduleSerializer,
    StudySessionFilterSerializer,
    StudySessionSerializer,
    UserStatsSerializer,
)


class StudyScheduleViewSet(viewsets.ModelViewSet):
    """
    API para os Cronogramas de Estudo do usuário.
    Inclui a ação 'ai-generate', que monta o cronograma a partir do PDF de um edital.
    """
    serializer_class = StudyScheduleSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return StudySchedule.objects.for_user(self.request.user).select_related('edital_pdf')

    def perform_create(self, serializer):
        serializer.save(user=self.request.user)

    @extend_schema(request=AIScheduleRequestSerializer, responses={201: AIScheduleResponseSerializer})
    @action(
        detail=False,
        methods=['post'],
        url_path='ai-generate',
        parser_classes=[MultiPartParser, FormParser],
    )
    def ai_generate(self, request):
        """
        Espera 'edital_pdf' (arquivo), 'exam_date' (AAAA-MM-DD) e 'title' opcional.
        Falhas do modelo de linguagem não chegam ao cliente: a análise heurística assume.
        """
        request_serializer = AIScheduleRequestSerializer(data=request.data)
        request_serializer.is_valid(raise_exception=True)

        validated_data = request_serializer.validated_data
        result = services.generate_schedule_from_edital(
            user=request.user,
            edital_file=validated_data['edital_pdf'],
            exam_date=validated_data['exam_date'],
            title=validated_data.get('title') or None,
        )

        response_serializer = AIScheduleResponseSerializer(result, context={'request': request})
        return Response(response_serializer.data, status=status.HTTP_201_CREATED)


class StudySessionViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    API para as Sessões de Estudo concluídas.
    Sessões são apenas registradas e consultadas; não há edição nem exclusão.
    """
    serializer_class = StudySessionSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return StudySession.objects.for_user(self.request.user)

    def filter_queryset(self, queryset):
        if self.action != 'list':
            return queryset
        filter_serializer = StudySessionFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return queryset.recent(filter_serializer.validated_data['limit'])

    @extend_schema(parameters=[OpenApiParameter('limit', int, description="Quantidade de sessões recentes (padrão 10).")])
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def perform_create(self, serializer):
        serializer.save(user=self.request.user)


class StudyStatisticsAPIView(APIView):
    """Retorna total de horas, sessões concluídas e a sequência atual de dias de estudo."""

    permission_classes = [IsAuthenticated]

    @extend_schema(responses=UserStatsSerializer)
    def get(self, request, *args, **kwargs):
        stats = services.compute_user_stats(request.user)
        return Response(UserStatsSerializer(stats).data)
