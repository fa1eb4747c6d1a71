"""Pure transition function for the copy wizard.

    state = reduce(state, SetProductName("保湿精华"))
    state = reduce(state, Next())

``reduce`` never performs I/O. Guards that fail leave ``current_step`` where
it was and explain themselves through ``message``; the auth gate raises
``show_auth_prompt`` instead. Side effects (the API calls) live in
``seedcopy.wizard.session`` and report back through the ``Generation*``,
``Auth*`` and ``SignedOut`` actions.
"""

from dataclasses import dataclass
from typing import Callable, Union
from urllib.parse import urlparse

from seedcopy.schemas.copy import ContentType, CopyVariant, TargetAudience, WritingStyle
from seedcopy.wizard.state import (
    AUTH_REQUIRED_STEPS,
    BACKWARD,
    INPUT_STEPS,
    NAV_STEPS,
    RESULT_VIEWS,
    TAG_CATALOG,
    WizardState,
    WizardStep,
    WizardUser,
)

SIGN_IN_MESSAGE = "请先登录再继续"

FIELD_LABELS = {
    "content_type": "内容类型",
    "target_audience": "目标人群",
    "writing_style": "写作风格",
}


# ── Actions ─────────────────────────────────────────────────

@dataclass(frozen=True)
class SetProductName:
    name: str


@dataclass(frozen=True)
class ToggleTag:
    tag: str


@dataclass(frozen=True)
class ImportProduct:
    url: str


@dataclass(frozen=True)
class SelectContentType:
    value: str


@dataclass(frozen=True)
class SelectAudience:
    value: str


@dataclass(frozen=True)
class SelectStyle:
    value: str


@dataclass(frozen=True)
class Next:
    pass


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class JumpTo:
    step: WizardStep


@dataclass(frozen=True)
class Navigate:
    step: WizardStep


@dataclass(frozen=True)
class OpenResultView:
    step: WizardStep


@dataclass(frozen=True)
class StartOver:
    pass


@dataclass(frozen=True)
class GenerationStarted:
    pass


@dataclass(frozen=True)
class GenerationSucceeded:
    generation_id: str
    variants: tuple[CopyVariant, ...]
    notice: str | None = None


@dataclass(frozen=True)
class GenerationFailed:
    message: str


@dataclass(frozen=True)
class FeedbackSubmitted:
    pass


@dataclass(frozen=True)
class AuthSucceeded:
    user: WizardUser
    access_token: str


@dataclass(frozen=True)
class AuthExpired:
    message: str = "登录已过期，请重新登录"


@dataclass(frozen=True)
class AuthRequired:
    pass


@dataclass(frozen=True)
class SignedOut:
    pass


@dataclass(frozen=True)
class DismissAuthPrompt:
    pass


@dataclass(frozen=True)
class ShowMessage:
    message: str


@dataclass(frozen=True)
class ClearMessage:
    pass


Action = Union[
    SetProductName, ToggleTag, ImportProduct,
    SelectContentType, SelectAudience, SelectStyle,
    Next, Back, JumpTo, Navigate, OpenResultView, StartOver,
    GenerationStarted, GenerationSucceeded, GenerationFailed, FeedbackSubmitted,
    AuthSucceeded, AuthRequired, AuthExpired, SignedOut, DismissAuthPrompt,
    ShowMessage, ClearMessage,
]


# ── Helpers ─────────────────────────────────────────────────

def _update(state: WizardState, **changes) -> WizardState:
    return state.model_copy(update=changes)


def _reject(state: WizardState, message: str) -> WizardState:
    return _update(state, message=message)


def _require_auth(state: WizardState) -> WizardState:
    return _update(state, show_auth_prompt=True, message=SIGN_IN_MESSAGE)


def _move(state: WizardState, step: WizardStep) -> WizardState:
    return _update(state, current_step=step, message=None)


def missing_fields(state: WizardState) -> list[str]:
    """Names of the generation inputs that are still empty."""
    missing = []
    if not state.product_name.strip():
        missing.append("product_name")
    if state.content_type is None:
        missing.append("content_type")
    if state.target_audience is None:
        missing.append("target_audience")
    if state.writing_style is None:
        missing.append("writing_style")
    return missing


# Host fragment → (product name, tags). Heuristic only; the page is never fetched.
IMPORT_TABLE: list[tuple[tuple[str, ...], str, tuple[str, ...]]] = [
    (("taobao", "tmall"), "淘宝商品", ("moisturizing", "repair")),
    (("xiaohongshu", "xhs"), "小红书推荐商品", ("whitening", "anti-aging")),
    (("douyin", "tiktok"), "抖音热门商品", ("refreshing", "antioxidant")),
]
IMPORT_DEFAULT = ("未识别产品", ("repair",))


def lookup_product(url: str) -> tuple[str, tuple[str, ...]] | None:
    """Guess a product name and tags from a shop URL, or None if it isn't a URL."""
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return None
    host = parsed.hostname.lower()
    for fragments, name, tags in IMPORT_TABLE:
        if any(fragment in host for fragment in fragments):
            return name, tags
    return IMPORT_DEFAULT


# ── Field edits ─────────────────────────────────────────────

def _set_product_name(state: WizardState, action: SetProductName) -> WizardState:
    return _update(state, product_name=action.name, message=None)


def _toggle_tag(state: WizardState, action: ToggleTag) -> WizardState:
    if action.tag not in TAG_CATALOG:
        return _reject(state, f"未知标签：{action.tag}")
    if action.tag in state.selected_tags:
        tags = tuple(t for t in state.selected_tags if t != action.tag)
    else:
        tags = state.selected_tags + (action.tag,)
    return _update(state, selected_tags=tags, message=None)


def _import_product(state: WizardState, action: ImportProduct) -> WizardState:
    found = lookup_product(action.url)
    if found is None:
        return _reject(state, "请输入有效的商品链接")
    name, tags = found
    return _update(state, product_name=name, selected_tags=tags, message=None)


def _select(field: str, enum_cls) -> Callable:
    def handler(state: WizardState, action) -> WizardState:
        try:
            value = enum_cls(action.value)
        except ValueError:
            return _reject(state, f"未知{FIELD_LABELS[field]}：{action.value}")
        return _update(state, **{field: value, "message": None})
    return handler


# ── Navigation ──────────────────────────────────────────────

def _next(state: WizardState, action: Next) -> WizardState:
    step = state.current_step

    if step == WizardStep.WELCOME:
        if not state.is_authenticated:
            return _require_auth(state)
        return _move(state, WizardStep.PRODUCT_INPUT)

    if step == WizardStep.PRODUCT_INPUT:
        if not state.product_name.strip():
            return _reject(state, "请先输入产品名称")
        return _move(state, WizardStep.TYPE_SELECTION)

    if step == WizardStep.TYPE_SELECTION:
        if state.content_type is None or state.target_audience is None:
            return _reject(state, "请选择内容类型和目标人群")
        return _move(state, WizardStep.STYLE_SELECTION)

    if step == WizardStep.STYLE_SELECTION:
        if state.writing_style is None:
            return _reject(state, "请选择写作风格")
        return _move(state, WizardStep.CONFIRMATION)

    if step == WizardStep.CONFIRMATION:
        return _reject(state, "请提交生成以查看结果")

    return _reject(state, f"{step.value} 没有下一步")


def _back(state: WizardState, action: Back) -> WizardState:
    target = BACKWARD.get(state.current_step)
    if target is None:
        return state
    return _move(state, target)


def _jump_to(state: WizardState, action: JumpTo) -> WizardState:
    if state.current_step != WizardStep.CONFIRMATION or action.step not in INPUT_STEPS:
        return _reject(state, f"无法跳转到 {action.step.value}")
    return _move(state, action.step)


def _navigate(state: WizardState, action: Navigate) -> WizardState:
    if not state.nav_visible or action.step not in NAV_STEPS:
        return _reject(state, f"无法进入 {action.step.value}")
    if action.step in AUTH_REQUIRED_STEPS and not state.is_authenticated:
        return _require_auth(state)
    return _move(state, action.step)


def _open_result_view(state: WizardState, action: OpenResultView) -> WizardState:
    if state.current_step != WizardStep.RESULTS or action.step not in RESULT_VIEWS:
        return _reject(state, f"无法打开 {action.step.value}")
    return _move(state, action.step)


def _start_over(state: WizardState, action: StartOver) -> WizardState:
    if state.current_step not in (WizardStep.RESULTS,) + RESULT_VIEWS:
        return _reject(state, "当前没有可重新开始的内容")
    # generated_content stays until a new generation replaces it
    return _move(state, WizardStep.PRODUCT_INPUT)


# ── Generation ──────────────────────────────────────────────

def _generation_started(state: WizardState, action: GenerationStarted) -> WizardState:
    if not state.is_authenticated:
        return _require_auth(state)
    if state.is_generating:
        return _reject(state, "正在生成中，请稍候")
    if state.current_step != WizardStep.CONFIRMATION:
        return _reject(state, "请先确认选择再生成")
    missing = missing_fields(state)
    if missing:
        return _reject(state, f"缺少：{', '.join(missing)}")
    return _update(state, is_generating=True, message=None)


def _generation_succeeded(state: WizardState, action: GenerationSucceeded) -> WizardState:
    return _update(
        state,
        current_step=WizardStep.RESULTS,
        generated_content=tuple(action.variants),
        current_generation_id=action.generation_id,
        is_generating=False,
        message=action.notice,
    )


def _generation_failed(state: WizardState, action: GenerationFailed) -> WizardState:
    return _update(state, is_generating=False, message=action.message)


def _feedback_submitted(state: WizardState, action: FeedbackSubmitted) -> WizardState:
    step = WizardStep.RESULTS if state.current_step == WizardStep.FEEDBACK else state.current_step
    return _update(state, current_step=step, message="感谢您的反馈")


# ── Auth ────────────────────────────────────────────────────

def _auth_succeeded(state: WizardState, action: AuthSucceeded) -> WizardState:
    step = state.current_step
    if step == WizardStep.WELCOME:
        step = WizardStep.PRODUCT_INPUT
    return _update(
        state,
        user=action.user,
        access_token=action.access_token,
        current_step=step,
        show_auth_prompt=False,
        message=None,
    )


def _auth_required(state: WizardState, action: AuthRequired) -> WizardState:
    return _require_auth(state)


def _auth_expired(state: WizardState, action: AuthExpired) -> WizardState:
    return _update(
        state,
        user=None,
        access_token=None,
        show_auth_prompt=True,
        is_generating=False,
        message=action.message,
    )


def _signed_out(state: WizardState, action: SignedOut) -> WizardState:
    return WizardState()


def _dismiss_auth_prompt(state: WizardState, action: DismissAuthPrompt) -> WizardState:
    return _update(state, show_auth_prompt=False)


def _show_message(state: WizardState, action: ShowMessage) -> WizardState:
    return _update(state, message=action.message)


def _clear_message(state: WizardState, action: ClearMessage) -> WizardState:
    return _update(state, message=None)


_HANDLERS: dict[type, Callable[[WizardState, Action], WizardState]] = {
    SetProductName: _set_product_name,
    ToggleTag: _toggle_tag,
    ImportProduct: _import_product,
    SelectContentType: _select("content_type", ContentType),
    SelectAudience: _select("target_audience", TargetAudience),
    SelectStyle: _select("writing_style", WritingStyle),
    Next: _next,
    Back: _back,
    JumpTo: _jump_to,
    Navigate: _navigate,
    OpenResultView: _open_result_view,
    StartOver: _start_over,
    GenerationStarted: _generation_started,
    GenerationSucceeded: _generation_succeeded,
    GenerationFailed: _generation_failed,
    FeedbackSubmitted: _feedback_submitted,
    AuthSucceeded: _auth_succeeded,
    AuthRequired: _auth_required,
    AuthExpired: _auth_expired,
    SignedOut: _signed_out,
    DismissAuthPrompt: _dismiss_auth_prompt,
    ShowMessage: _show_message,
    ClearMessage: _clear_message,
}


def reduce(state: WizardState, action: Action) -> WizardState:
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unsupported wizard action: {type(action).__name__}")
    return handler(state, action)
