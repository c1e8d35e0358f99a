"""
HTML pages.

`public_router` serves the landing page and the sign-in endpoints.
`router` is the authenticated subtree: its route class runs every page
through the auth gate, so handlers only ever see a signed-in user.
"""
import asyncio
import functools
from datetime import datetime
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse, Response
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from kharcha.core.database import get_db
from kharcha.core.exceptions import KharchaError, ValidationError
from kharcha.core.logging_config import logger
from kharcha.core.rate_limiter import sign_in_rate_limit
from kharcha.models.account import AccountType
from kharcha.models.outflow_type import SUBSCRIPTION
from kharcha.models.user import User
from kharcha.modules.auth.dependencies import (
    get_auth_service,
    get_current_user,
    get_session_provider,
    get_session_state,
    get_sign_in_registry,
)
from kharcha.modules.auth.gate import AuthGatedRoute, render_sign_in
from kharcha.modules.auth.service import AuthService
from kharcha.modules.auth.session import Authenticated, SessionState, SessionTokenProvider
from kharcha.modules.auth.sign_in import SignInFlowRegistry
from kharcha.schemas.account import AccountCreate
from kharcha.schemas.budget import BudgetCreate
from kharcha.schemas.outflow_type import OutflowTypeCreate
from kharcha.schemas.transaction import TransactionCreate, TransactionFilters
from kharcha.schemas.user import PreferencesUpdate
from kharcha.services import insights_service
from kharcha.services.account_service import account_service
from kharcha.services.budget_service import budget_service
from kharcha.services.notification_service import notification_service
from kharcha.services.outflow_type_service import outflow_type_service
from kharcha.services.transaction_service import transaction_service
from kharcha.services.user_service import user_service
from kharcha.utils.currency import CURRENCIES
from kharcha.utils.dates import month_key, utcnow
from kharcha.web.templating import templates

DISCONNECT_POLL_SECONDS = 0.25

public_router = APIRouter()
router = APIRouter(route_class=AuthGatedRoute)


def redirect(url: str, error: Optional[str] = None) -> RedirectResponse:
    """303 back to a page; `error` is shown above the page content"""
    if error:
        url = f"{url}?{urlencode({'error': error})}"
    return RedirectResponse(url, status_code=303)


def form_error(exc: Exception) -> str:
    """Display text for a rejected form submission"""
    if isinstance(exc, SchemaValidationError):
        err = exc.errors()[0]
        field = ".".join(str(part) for part in err["loc"])
        return f"{field}: {err['msg']}" if field else err["msg"]
    if isinstance(exc, KharchaError):
        return exc.message
    return str(exc)


def parse_form_date(value: str, field: str = "date") -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid date '{value}'", field=field)


def parse_form_amount(value: str, field: str = "amount") -> float:
    try:
        return float(value)
    except ValueError:
        raise ValidationError(f"Invalid amount '{value}'", field=field)


async def _watch_disconnect(request: Request, cancel: asyncio.Event) -> None:
    while not cancel.is_set():
        if await request.is_disconnected():
            cancel.set()
            return
        await asyncio.sleep(DISCONNECT_POLL_SECONDS)


async def _page(request: Request, name: str, user: User, db: AsyncSession, **context) -> Response:
    """Render an authenticated page with the shared layout context"""
    context.setdefault("error", request.query_params.get("error", ""))
    preferences = await user_service.get_preferences(db, user.id)
    context.update(
        user=user,
        preferences=preferences,
        currency=preferences.currency,
        unread_count=await notification_service.unread_count(db, user.id),
    )
    return templates.TemplateResponse(request, name, context)


# ==================== Public pages ====================

@public_router.get("/features")
async def features(request: Request):
    return templates.TemplateResponse(request, "pages/features.html", {})


@public_router.get("/auth/signin")
async def sign_in_page(request: Request, state: SessionState = Depends(get_session_state)):
    if isinstance(state, Authenticated):
        return redirect("/")
    return render_sign_in(request)


@public_router.post("/auth/signin")
@sign_in_rate_limit()
async def submit_sign_in(
    request: Request,
    email: str = Form(...),
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
    registry: SignInFlowRegistry = Depends(get_sign_in_registry),
):
    """Send the sign-in link and re-render the form with the outcome"""
    email = email.strip()
    if not email:
        return render_sign_in(request)

    flow = registry.flow_for(email, functools.partial(auth_service.sign_in, db))
    cancel = asyncio.Event()
    watcher = asyncio.create_task(_watch_disconnect(request, cancel))
    try:
        await flow.submit(email, cancel)
    finally:
        watcher.cancel()
        registry.release(email, flow)

    return render_sign_in(request, message=flow.message, busy=flow.busy, email=email)


@public_router.get("/auth/callback")
async def sign_in_callback(
    request: Request,
    token: str = "",
    email: str = "",
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
    provider: SessionTokenProvider = Depends(get_session_provider),
):
    """Target of the emailed link: start a session and go to the dashboard"""
    try:
        _, access_token = await auth_service.verify_link(db, token, email)
    except KharchaError as e:
        return render_sign_in(request, message=f"{e.message}. Please request a new link.", email=email)

    response = redirect("/")
    provider.set_session_cookie(response, access_token)
    return response


@public_router.post("/auth/signout")
async def sign_out(provider: SessionTokenProvider = Depends(get_session_provider)):
    response = redirect("/auth/signin")
    provider.clear_session_cookie(response)
    logger.log_auth_event("sign_out", success=True)
    return response


# ==================== Dashboard ====================

@router.get("/")
async def index(request: Request, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await dashboard(request, user, db)


@router.get("/dashboard")
async def dashboard(request: Request, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    month = month_key(utcnow())
    recent, _ = await transaction_service.list_for_user(db, user.id, TransactionFilters(limit=5))
    return await _page(
        request,
        "pages/dashboard.html",
        user,
        db,
        active="dashboard",
        month=month,
        summary=await transaction_service.monthly_summary(db, user.id, month),
        budgets=await budget_service.progress(db, user.id, month),
        upcoming=await insights_service.upcoming_events(db, user.id),
        streak=await insights_service.tracking_streak(db, user.id),
        recent=recent,
        notifications=await notification_service.list_for_user(db, user.id, limit=5),
    )


@router.post("/notifications/read-all")
async def read_all_notifications(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    await notification_service.mark_all_read(db, user.id)
    return redirect("/dashboard")


# ==================== Transactions ====================

@router.get("/transactions")
async def transactions_page(
    request: Request,
    search: Optional[str] = None,
    account_id: Optional[str] = None,
    outflow_type_id: Optional[str] = None,
    sort_by: str = "date",
    sort_order: str = "desc",
    offset: int = 0,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    filters = TransactionFilters(
        search=search or None,
        account_id=account_id or None,
        outflow_type_id=outflow_type_id or None,
        sort_by="amount" if sort_by == "amount" else "date",
        sort_order="asc" if sort_order == "asc" else "desc",
        offset=max(offset, 0),
    )
    items, total = await transaction_service.list_for_user(db, user.id, filters)
    return await _page(
        request,
        "pages/transactions.html",
        user,
        db,
        active="transactions",
        transactions=items,
        total=total,
        filters=filters,
        accounts=await account_service.list_for_user(db, user.id),
        outflow_types=await outflow_type_service.list_for_user(db, user.id),
        today=utcnow().strftime("%Y-%m-%d"),
    )


@router.post("/transactions")
async def add_transaction(
    request: Request,
    amount: str = Form(...),
    date: str = Form(...),
    account_id: str = Form(...),
    outflow_type_id: str = Form(...),
    note: str = Form(""),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    # Extra fields of the outflow type arrive as meta_<key>
    form = await request.form()
    metadata = {key[5:]: value for key, value in form.items() if key.startswith("meta_") and value != ""}
    if "remind" in metadata:
        metadata["remind"] = metadata["remind"] in ("on", "true", "1")

    try:
        await transaction_service.create(db, user.id, TransactionCreate(
            amount=parse_form_amount(amount),
            date=parse_form_date(date),
            account_id=account_id,
            outflow_type_id=outflow_type_id,
            note=note,
            metadata=metadata,
        ))
    except (KharchaError, SchemaValidationError) as e:
        return redirect("/transactions", error=form_error(e))
    return redirect("/transactions")


@router.post("/transactions/{transaction_id}/delete")
async def remove_transaction(
    transaction_id: str, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)
):
    try:
        await transaction_service.delete(db, user.id, transaction_id)
    except KharchaError as e:
        return redirect("/transactions", error=form_error(e))
    return redirect("/transactions")


@router.post("/subscriptions")
async def add_subscription(
    provider: str = Form(...),
    amount: str = Form(...),
    renewal_date: str = Form(...),
    account_id: str = Form(...),
    frequency: str = Form("monthly"),
    remind: bool = Form(False),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Quick add: records a Subscription transaction dated on its renewal"""
    try:
        value = parse_form_amount(amount)
        renews_on = parse_form_date(renewal_date, field="renewal_date")
        subscription_type = await outflow_type_service.get_or_create(db, user.id, SUBSCRIPTION, emoji="🔁")
        await transaction_service.create(db, user.id, TransactionCreate(
            amount=value,
            date=renews_on,
            account_id=account_id,
            outflow_type_id=subscription_type.id,
            note=f"{provider} subscription",
            metadata={"provider": provider, "renewal_date": renewal_date, "remind": remind, "frequency": frequency},
        ))
    except (KharchaError, SchemaValidationError) as e:
        return redirect("/insights", error=form_error(e))
    return redirect("/insights")


# ==================== Insights ====================

@router.get("/insights")
async def insights_page(request: Request, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await _page(
        request,
        "pages/insights.html",
        user,
        db,
        active="insights",
        monthly=await insights_service.monthly_spend(db, user.id),
        breakdown=await insights_service.outflow_type_breakdown(db, user.id),
        subscriptions=await insights_service.subscriptions(db, user.id),
        loans=await insights_service.loans(db, user.id),
        ageing=await insights_service.money_lent_ageing(db, user.id),
        projected=await insights_service.projected_recurring(db, user.id),
        accounts=await account_service.list_for_user(db, user.id),
    )


# ==================== Accounts ====================

@router.get("/accounts")
async def accounts_page(request: Request, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    accounts = await account_service.list_for_user(db, user.id)
    totals = {a.id: await account_service.total_spent(db, a.id) for a in accounts}
    return await _page(
        request,
        "pages/accounts.html",
        user,
        db,
        active="accounts",
        accounts=accounts,
        totals=totals,
        account_types=list(AccountType),
    )


@router.post("/accounts")
async def add_account(
    name: str = Form(...),
    account_type: str = Form(..., alias="type"),
    color_hex: str = Form("#6366f1"),
    budget: Optional[str] = Form(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        await account_service.create(db, user.id, AccountCreate(
            name=name,
            type=account_type,
            color_hex=color_hex,
            budget=parse_form_amount(budget, field="budget") if budget else None,
        ))
    except (KharchaError, SchemaValidationError) as e:
        return redirect("/accounts", error=form_error(e))
    return redirect("/accounts")


@router.post("/accounts/{account_id}/archive")
async def archive_account(account_id: str, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    try:
        await account_service.archive(db, user.id, account_id)
    except KharchaError as e:
        return redirect("/accounts", error=form_error(e))
    return redirect("/accounts")


# ==================== Outflow types ====================

@router.get("/outflow-types")
async def outflow_types_page(
    request: Request, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)
):
    month = month_key(utcnow())
    return await _page(
        request,
        "pages/outflow_types.html",
        user,
        db,
        active="outflow-types",
        outflow_types=await outflow_type_service.list_for_user(db, user.id),
        budgets=await budget_service.progress(db, user.id, month),
        month=month,
    )


@router.post("/outflow-types")
async def add_outflow_type(
    name: str = Form(...),
    emoji: str = Form("📦"),
    color_hex: str = Form("#94a3b8"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        await outflow_type_service.create(db, user.id, OutflowTypeCreate(name=name, emoji=emoji, color_hex=color_hex))
    except (KharchaError, SchemaValidationError) as e:
        return redirect("/outflow-types", error=form_error(e))
    return redirect("/outflow-types")


@router.post("/outflow-types/{outflow_type_id}/delete")
async def remove_outflow_type(
    outflow_type_id: str, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)
):
    try:
        await outflow_type_service.delete(db, user.id, outflow_type_id)
    except KharchaError as e:
        return redirect("/outflow-types", error=form_error(e))
    return redirect("/outflow-types")


@router.post("/budgets")
async def add_budget(
    outflow_type_id: str = Form(...),
    amount: str = Form(...),
    month: str = Form(...),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        await budget_service.create(db, user.id, BudgetCreate(
            outflow_type_id=outflow_type_id, amount=parse_form_amount(amount), month=month
        ))
    except (KharchaError, SchemaValidationError) as e:
        return redirect("/outflow-types", error=form_error(e))
    return redirect("/outflow-types")


# ==================== Settings ====================

@router.get("/settings")
async def settings_page(request: Request, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await _page(request, "pages/settings.html", user, db, active="settings", currencies=CURRENCIES)


@router.post("/settings")
async def save_settings(
    currency: str = Form(...),
    dark_mode: bool = Form(False),
    global_notifications: bool = Form(False),
    subscription_reminders: bool = Form(False),
    due_date_reminders: bool = Form(False),
    email_notifications: bool = Form(False),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    # Unchecked checkboxes are absent from the form, hence the False defaults
    try:
        await user_service.update_preferences(db, user.id, PreferencesUpdate(
            currency=currency,
            dark_mode=dark_mode,
            global_notifications=global_notifications,
            subscription_reminders=subscription_reminders,
            due_date_reminders=due_date_reminders,
            email_notifications=email_notifications,
        ))
    except SchemaValidationError as e:
        return redirect("/settings", error=form_error(e))
    return redirect("/settings")


@router.post("/settings/delete-data")
async def delete_data(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    await user_service.delete_all_data(db, user.id)
    return redirect("/dashboard")
