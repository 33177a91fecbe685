"""
Third-party integration webhooks and clients.
"""
from projectit.services.integrations.authenticator import ApiKeyAuthenticator, SharedSecretAuthenticator
from projectit.services.integrations.dispatcher import EventDispatcher
from projectit.services.integrations.reconciler import FieldReconciler
from projectit.services.integrations.base import WebhookProcessor
from projectit.services.integrations.halopsa_webhook import HaloPSAWebhookProcessor
from projectit.services.integrations.proposal_webhook import ProposalWebhookProcessor
from projectit.services.integrations.gammastack_receiver import GammaStackReceiver
from projectit.services.integrations.gammaai_webhook import GammaAiWebhookProcessor
from projectit.services.integrations.incoming import IncomingWebhookRecorder
from projectit.services.integrations.quoteit_client import (
    QuoteITClient,
    link_quote_to_project,
    pull_quoteit_quotes,
)

# Webhook processors reachable at /webhook/{integration}
PROCESSORS = {
    "halopsa": HaloPSAWebhookProcessor,
    "gammastack": GammaStackReceiver,
    "gammaai": GammaAiWebhookProcessor,
    "proposal": ProposalWebhookProcessor,
}

__all__ = [
    "ApiKeyAuthenticator",
    "SharedSecretAuthenticator",
    "EventDispatcher",
    "FieldReconciler",
    "WebhookProcessor",
    "HaloPSAWebhookProcessor",
    "ProposalWebhookProcessor",
    "GammaStackReceiver",
    "GammaAiWebhookProcessor",
    "IncomingWebhookRecorder",
    "QuoteITClient",
    "link_quote_to_project",
    "pull_quoteit_quotes",
    "PROCESSORS",
]
