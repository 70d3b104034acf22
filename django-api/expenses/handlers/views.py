"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Leave domain error mapping to expenses.handlers.errors
- Never contain business logic
- Never expose internal error details
"""

from django.conf import settings
from django.utils.module_loading import import_string
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from expenses import cache
from expenses.domain import Expense, Money
from expenses.handlers.serializers import (
    BillUploadSerializer,
    ClaimRequestSerializer,
    ExpenseRequestSerializer,
    ExpenseSerializer,
    PersonRequestSerializer,
)
from expenses.ingestion import BillParser
from expenses.services import ExpenseService
from expenses.slugs import SlugGenerator
from expenses.stores.django_store import DjangoExpenseStore


def build_bill_parser() -> BillParser | None:
    path = settings.EXPENSES["BILL_PARSER"]
    if not path:
        return None
    return import_string(path)(**settings.EXPENSES["BILL_PARSER_OPTIONS"])


def build_expense_service() -> ExpenseService:
    store = DjangoExpenseStore()
    return ExpenseService(
        store=store,
        slug_generator=SlugGenerator(store),
        bill_parser=build_bill_parser(),
        validate_total=settings.EXPENSES["VALIDATE_TOTAL"],
        total_margin=Money(settings.EXPENSES["TOTAL_MARGIN"]),
    )


def render(expense: Expense) -> dict:
    return ExpenseSerializer(expense).data


class ExpenseAPIView(APIView):
    @property
    def service(self) -> ExpenseService:
        return build_expense_service()


class ExpenseCreateView(ExpenseAPIView):
    """Handler for POST /api/expenses"""

    def post(self, request: Request) -> Response:
        serializer = ExpenseRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        expense = self.service.create_expense(serializer.to_draft())
        return Response(render(expense), status=status.HTTP_201_CREATED)


class ExpenseUploadView(ExpenseAPIView):
    """Handler for POST /api/expenses/upload"""

    parser_classes = [MultiPartParser, FormParser]

    def post(self, request: Request) -> Response:
        serializer = BillUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        image_bytes = serializer.validated_data["bill"].read()
        expense = self.service.create_expense_from_image(
            image_bytes, serializer.validated_data["payer_name"]
        )
        return Response(render(expense), status=status.HTTP_201_CREATED)


class ExpenseDetailView(ExpenseAPIView):
    """Handler for GET/PUT /api/expenses/{slug}"""

    def get(self, request: Request, slug: str) -> Response:
        data = cache.get_expense(slug)
        if data is None:
            data = render(self.service.get_expense(slug))
            cache.set_expense(slug, data)
        return Response(data)

    def put(self, request: Request, slug: str) -> Response:
        serializer = ExpenseRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        expense = self.service.update_expense(slug, serializer.to_draft())
        return Response(render(expense))


class ItemClaimView(ExpenseAPIView):
    """Handler for POST /api/expenses/{slug}/items/{item_id}/claim"""

    def post(self, request: Request, slug: str, item_id: str) -> Response:
        serializer = ClaimRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        expense = self.service.claim_item(
            slug, item_id, str(serializer.validated_data["person_id"])
        )
        return Response(render(expense))


class ItemUnclaimView(ExpenseAPIView):
    """Handler for DELETE /api/expenses/{slug}/items/{item_id}/claim/{person_id}"""

    def delete(self, request: Request, slug: str, item_id: str, person_id: str) -> Response:
        expense = self.service.unclaim_item(slug, item_id, person_id)
        return Response(render(expense))


class PersonListView(ExpenseAPIView):
    """Handler for POST /api/expenses/{slug}/people"""

    def post(self, request: Request, slug: str) -> Response:
        serializer = PersonRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        expense = self.service.add_person(slug, serializer.to_draft())
        return Response(render(expense))


class PersonFinishView(ExpenseAPIView):
    """Handler for PUT /api/expenses/{slug}/people/{person_id}/finish"""

    def put(self, request: Request, slug: str, person_id: str) -> Response:
        self.service.mark_person_finished(slug, person_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class PersonPendingView(ExpenseAPIView):
    """Handler for PUT /api/expenses/{slug}/people/{person_id}/pending"""

    def put(self, request: Request, slug: str, person_id: str) -> Response:
        self.service.mark_person_pending(slug, person_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
