# Services package
from .profile import ProfileService, ProfileNotFoundError, CreditUpdateConflict
from .humanizations import HumanizationStore
from .input_validator import InputValidator, InputValidationError
from .options import normalize_options
from .fallback import RuleBasedRewriter
from .prompt_builder import build_system_instruction
from .strategies import (
    RewriteStrategy,
    RewriteError,
    RecoverableRewriteError,
    FatalRewriteError,
    LocalFallbackStrategy
)
from .async_job_provider import (
    AsyncJob,
    AsyncJobClient,
    AsyncJobStrategy,
    JobStatus,
    ProviderError,
    ProviderCreditsError,
    PollTimeoutError
)
from .chat_provider import ChatCompletionStrategy
from .rewrite_adapter import RewriteAdapter, get_rewrite_adapter
from .rewrite_client import (
    RewriteService,
    HttpRewriteService,
    InProcessRewriteService,
    get_rewrite_service
)
from .orchestrator import (
    HumanizationOrchestrator,
    HumanizationOutcome,
    HumanizationError,
    AuthorizationError,
    QuotaExceededError,
    RewriteFailedError
)
from .documents import DocumentService, DocumentError, extract_text
from .payments import PaymentService, PLANS
from .contact import ContactService
