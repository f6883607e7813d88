"""
Session acquisition and escalation.

A session moves through three states:

1. unauthenticated - only a company slug is known
2. anonymous - ``Session(uuid, id)``, obtained from the slug redirect
3. authenticated - ``Session(uuid, id, token)``, obtained by logging in

Login and language changes go through the portal's WebForms pages: the
form is fetched first to read its hidden state fields, which are then
posted back verbatim. The portal signals success only by redirecting.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from urllib.parse import urlsplit

from tarjouspalvelu.core.errors import (
    InvalidSlug,
    LanguageMismatch,
    LoginFailed,
    PortalRequestFailed,
    SessionAcquisitionFailed,
)
from tarjouspalvelu.core.extract import schemas
from tarjouspalvelu.core.extract.html import parse_html, required_attr
from tarjouspalvelu.core.models import (
    SESSION_ID_COOKIE,
    SESSION_TOKEN_COOKIE,
    Language,
    Session,
)
from tarjouspalvelu.core.normalize.parsing import match_locale
from tarjouspalvelu.core.portal.protocol import (
    Page,
    PortalRequester,
    Redirect,
    expect_redirect,
)

logger = logging.getLogger(__name__)


# Unknown slugs are sent back to the portal front page
INVALID_SLUG_PATH = "/default/index"

LOGIN_USERNAME_FIELD = "ctl00$header$LoginView1$LoginCtrl$UserName"
LOGIN_PASSWORD_FIELD = "ctl00$header$LoginView1$LoginCtrl$Password"
LOGIN_BUTTON_FIELD = "ctl00$header$LoginView1$LoginCtrl$btnLogin"
# The button label is posted as a form field and must be the Finnish one
LOGIN_BUTTON_VALUE = "Sisään"

# __EVENTTARGET of the language links in the page header. The Danish link
# was added later and kept its designer-generated name.
LANGUAGE_EVENT_TARGETS = MappingProxyType({
    Language.FI: "ctl00$header$Kieli_fiFI",
    Language.SV: "ctl00$header$Kieli_svSE",
    Language.EN: "ctl00$header$Kieli_enGB",
    Language.DA: "ctl00$header$LinkButton1",
})

# Cookie the portal expects to be present (empty) when switching language
LANGUAGE_COOKIE = "tarjouspalvelu.fi"


# =============================================================================
# Anonymous Sessions
# =============================================================================


async def _resolve_slug(requester: PortalRequester, slug: str) -> Redirect:
    try:
        response = await requester.head(requester.urls.company_slug(slug), operation="company page")
    except PortalRequestFailed as e:
        raise SessionAcquisitionFailed(
            f"Failed getting company page for slug {slug!r}, portal answered {e.status_code}",
            url=e.url,
            status_code=e.status_code,
        ) from e

    if not isinstance(response, Redirect) or not response.location:
        raise SessionAcquisitionFailed(
            f"Failed getting company page for slug {slug!r}, no redirect",
            url=response.url,
            status_code=response.status_code,
        )

    if urlsplit(response.location).path.rstrip("/").lower() == INVALID_SLUG_PATH:
        raise InvalidSlug(f"Invalid company slug {slug!r}", url=response.url)

    return response


async def company_slug_to_id(requester: PortalRequester, slug: str) -> int:
    """Convert a company slug to its numeric id.

    Args:
        requester: Portal requester
        slug: Company slug, e.g. "helsinki"

    Returns:
        Numeric company id

    Raises:
        InvalidSlug: If no company has the slug
        SessionAcquisitionFailed: If the redirect carries no company id
    """
    redirect = await _resolve_slug(requester, slug)

    company_id = redirect.query_param("p")
    if company_id is None or not company_id.isdigit():
        raise SessionAcquisitionFailed(f"Failed getting company id for slug {slug!r}")

    logger.debug(f"Slug {slug} is company {company_id}", extra={"slug": slug})
    return int(company_id)


async def get_session(requester: PortalRequester, slug: str) -> Session:
    """Acquire an anonymous session through a company slug.

    Args:
        requester: Portal requester
        slug: Slug of any company; the session is bound to its context

    Returns:
        Anonymous session

    Raises:
        InvalidSlug: If no company has the slug
        SessionAcquisitionFailed: If the uuid or the session cookie is missing
    """
    redirect = await _resolve_slug(requester, slug)

    uuid = redirect.query_param("g")
    session_id = redirect.cookie(SESSION_ID_COOKIE)

    if not uuid or not session_id:
        raise SessionAcquisitionFailed(f"Failed getting session for slug {slug!r}")

    logger.info(f"Acquired anonymous session via {slug}", extra={"slug": slug})
    return Session(uuid=uuid, id=session_id)


# =============================================================================
# WebForms
# =============================================================================


def parse_form_state(html: str) -> dict[str, str]:
    """Read the hidden WebForms state fields that must be posted back."""
    tree = parse_html(html)
    return {
        name: required_attr(tree, f'[name="{name}"]', "value", name)
        for name in (schemas.EVENT_VALIDATION, schemas.VIEW_STATE)
    }


async def _load_form(
    requester: PortalRequester,
    company_id: int,
    session: Session,
    operation: str,
) -> tuple[str, dict[str, str]]:
    url = requester.urls.notices(company_id, session.uuid)
    page: Page = await requester.get_page(url, operation=operation, cookie=session.cookie_header())
    return url, parse_form_state(page.html)


# =============================================================================
# Authentication
# =============================================================================


async def login_to_session(
    requester: PortalRequester,
    company_id: int,
    username: str,
    password: str,
    session: Session,
) -> Session:
    """Log in an anonymous session.

    The given session is left untouched; the authenticated session is
    returned as a new value.

    Args:
        requester: Portal requester
        company_id: Any company id; the login is not restricted to it
        username: Login user name
        password: Login password
        session: Anonymous session to escalate

    Returns:
        Authenticated session

    Raises:
        BadSessionOrExpired: If the login page cannot be loaded with the session
        LoginFailed: If the credentials were not accepted
    """
    url, form_state = await _load_form(requester, company_id, session, "index page")

    try:
        response = await requester.post_form(
            url,
            {
                **form_state,
                LOGIN_USERNAME_FIELD: username,
                LOGIN_PASSWORD_FIELD: password,
                LOGIN_BUTTON_FIELD: LOGIN_BUTTON_VALUE,
            },
            operation="log in",
            cookie=session.cookie_header(),
        )
    except PortalRequestFailed as e:
        # Anything but a redirect means the login was not accepted
        raise LoginFailed(
            "Failed to log in, bad username/password?",
            url=e.url,
            status_code=e.status_code,
        ) from e

    redirect = expect_redirect(
        response,
        "log in",
        failure=LoginFailed,
        message="Failed to log in, bad username/password?",
    )

    token = redirect.cookie(SESSION_TOKEN_COOKIE)
    if not token:
        raise LoginFailed("Failed to log in, bad username/password?", url=redirect.url)

    logger.info("Logged in session", extra={"company_id": company_id})
    return session.with_token(token)


# =============================================================================
# Language
# =============================================================================


async def set_session_language(
    requester: PortalRequester,
    company_id: int,
    language: Language,
    session: Session,
) -> Session:
    """Switch the language of a session on the portal.

    The portal may ignore the change silently, so the culture it confirms
    is compared with the requested one.

    Returns:
        The same session; the language lives in server-side state

    Raises:
        BadSessionOrExpired: If the page cannot be loaded or the change is not accepted
        LanguageMismatch: If the portal confirmed another language
    """
    language = Language(language)
    url, form_state = await _load_form(requester, company_id, session, "index page")

    response = await requester.post_form(
        url,
        {**form_state, "__EVENTTARGET": LANGUAGE_EVENT_TARGETS[language]},
        operation="set the language",
        cookie=f"{session.cookie_header()} {LANGUAGE_COOKIE}=;",
    )

    redirect = expect_redirect(
        response,
        "set the language",
        message="Error setting the language, invalid session?",
    )

    confirmed = redirect.culture()
    if confirmed != language.value:
        raise LanguageMismatch(
            f"Response has an unexpected language {confirmed!r}, requested {language.value!r}",
            requested=language.value,
            confirmed=confirmed,
        )

    logger.info(f"Session language set to {language.value}", extra={"language": language.value})
    return session


async def get_session_language(
    requester: PortalRequester,
    company_id: int,
    session: Session,
) -> Language:
    """Read the current language of a session from a company page."""
    page = await requester.get_page(
        requester.urls.notices(company_id, session.uuid),
        operation="index page",
        cookie=session.cookie_header(with_token=session.is_authenticated),
    )
    return match_locale(page.html)
