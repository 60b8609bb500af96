"""Transaction classification with Gemini."""
import re
import json
from typing import Dict, List, Optional, Sequence

from google import genai
from pydantic import BaseModel, Field, ValidationError

from .models import CATEGORIES, TYPES, FALLBACK_LABEL, AnalyticsReport, Classification, Preference
from spendtrail.config import get_settings
from spendtrail.parsing import ParsedTransaction
from spendtrail.utils import get_logger, retry_with_backoff, RetryPolicy, ConfigError, LLMError, RetryableLLMError

logger = get_logger()

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class VerdictSchema(BaseModel):
    """Pydantic schema for a single-transaction classification."""
    category: str = Field(description="Transaction category")
    type: str = Field(description="Need, Want, Investment, Income or Other")
    merchant: Optional[str] = Field(default="", description="Merchant name if available")
    confidence: Optional[float] = Field(default=None, ge=0, le=100)
    note: Optional[str] = Field(default="", description="Brief insight")


class ClassificationSchema(VerdictSchema):
    """Pydantic schema for one classification in a batch."""
    index: int = Field(description="Transaction number from the list")


class ClassificationsResponse(BaseModel):
    """Pydantic schema for the batch classification response."""
    classifications: List[ClassificationSchema]


class DescriptionSchema(BaseModel):
    """Pydantic schema for one improved description."""
    index: int
    description: str


class DescriptionsResponse(BaseModel):
    """Pydantic schema for the batch description response."""
    descriptions: List[DescriptionSchema]


class TransactionClassifier:
    """Classifies parsed transactions using Gemini."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
        client=None
    ):
        """
        Initialize classifier.

        Args:
            api_key: Gemini API key, defaults to $GEMINI_API_KEY
            model_name: Model name, defaults to the configured model
            client: Pre-built genai client (used by tests)

        Raises:
            ConfigError: If no client is given and no API key is available
        """
        settings = get_settings()
        self.model_name = model_name or settings.llm_model_name
        self.default_confidence = settings.llm_default_confidence
        self.max_description_length = settings.llm_max_description_length

        if client is None:
            api_key = api_key or settings.gemini_api_key
            if not api_key:
                raise ConfigError("Gemini API key is required (set GEMINI_API_KEY)")
            client = genai.Client(api_key=api_key)
        self.client = client

        self.retry_policy = RetryPolicy(
            max_attempts=settings.llm_max_retries,
            backoff_factor=settings.llm_backoff_factor,
            max_backoff=settings.llm_max_backoff,
            retry_on=(RetryableLLMError,)
        )
        self._generate = retry_with_backoff(self.retry_policy, operation="Gemini request")(self._generate_once)

        logger.info(f"Transaction classifier initialized with {self.model_name}")

    def classify_batch(self, transactions: Sequence[ParsedTransaction]) -> Dict[int, Classification]:
        """
        Classify a batch of transactions in one request.

        Args:
            transactions: Parsed transactions

        Returns:
            Classifications keyed by 1-based batch index

        Raises:
            LLMError: If the response cannot be parsed
            RetryableLLMError: If the request keeps failing
        """
        if not transactions:
            return {}

        response_text = self._generate(self._build_classification_prompt(transactions))
        items = self._extract_json_array(response_text)

        try:
            validated = ClassificationsResponse(classifications=items)
        except ValidationError as e:
            logger.error(f"Classification response validation failed: {e}")
            raise LLMError(f"LLM response does not match expected schema: {e}")

        classifications = {}
        for item in validated.classifications:
            classifications[item.index] = self._to_classification(item, item.index)

        logger.info(f"Classified {len(classifications)} of {len(transactions)} transactions")
        return classifications

    def improve_descriptions(
        self,
        transactions: Sequence[ParsedTransaction],
        examples: Optional[Sequence[Preference]] = None
    ) -> List[str]:
        """
        Rewrite parsed descriptions into readable ones.

        Falls back to the parsed description for any transaction the model
        does not answer well, and for the whole batch if the request fails.

        Returns:
            One description per transaction, in input order
        """
        descriptions = [txn.description for txn in transactions]
        if not transactions:
            return descriptions

        try:
            response_text = self._generate(self._build_description_prompt(transactions, examples or []))
            items = self._extract_json_array(response_text)
            validated = DescriptionsResponse(descriptions=items)
        except (LLMError, ValueError) as e:
            logger.warning(f"Description generation failed, keeping parsed descriptions: {e}")
            return descriptions

        for item in validated.descriptions:
            improved = item.description.strip()
            if 1 <= item.index <= len(descriptions) and improved and len(improved) < self.max_description_length:
                descriptions[item.index - 1] = improved

        return descriptions

    def classify_one(self, description: str, merchant: str = "") -> Classification:
        """
        Classify a single manually entered transaction.

        Args:
            description: Transaction description
            merchant: Merchant name, if the user supplied one

        Returns:
            Classification with index 0

        Raises:
            LLMError: If the response cannot be parsed or the request keeps failing
        """
        if not description or not description.strip():
            raise LLMError("Cannot classify an empty description")

        transaction_text = f"{description.strip()} ({merchant.strip()})" if merchant and merchant.strip() else description.strip()
        response_text = self._generate(self._build_single_prompt(transaction_text))

        match = _JSON_OBJECT.search(response_text)
        if not match:
            logger.debug(f"Response text: {response_text[:500]}")
            raise LLMError("Failed to extract JSON object from response")

        try:
            item = VerdictSchema.model_validate_json(match.group(0))
        except ValidationError as e:
            logger.error(f"Classification response validation failed: {e}")
            raise LLMError(f"LLM response does not match expected schema: {e}")

        classification = self._to_classification(item, index=0)
        logger.info(f"Classified '{transaction_text}' as {classification.category}/{classification.type}")
        return classification

    def summarize(self, report: AnalyticsReport) -> str:
        """
        Write a short spending summary for an analytics report.

        Raises:
            LLMError: If the request keeps failing
        """
        summary = self._generate(self._build_summary_prompt(report)).strip()
        if not summary:
            raise LLMError("Gemini returned an empty summary")
        logger.info(f"Generated financial summary ({len(summary)} chars)")
        return summary

    def _generate_once(self, prompt: str) -> str:
        """Send a prompt and return the response text; retried by _generate."""
        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt
            )
        except Exception as e:
            raise RetryableLLMError(f"Gemini request failed: {e}")

        if not response.text:
            raise RetryableLLMError("Gemini returned an empty response")
        return response.text

    def _extract_json_array(self, response_text: str) -> list:
        """Pull the first JSON array out of a model response."""
        match = _JSON_ARRAY.search(response_text)
        if not match:
            logger.debug(f"Response text: {response_text[:500]}")
            raise LLMError("Failed to extract JSON array from response")

        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            logger.debug(f"Response text: {response_text[:500]}")
            raise LLMError(f"Invalid JSON response from LLM: {e}")

        if not isinstance(data, list):
            raise LLMError("Expected a JSON array from LLM")
        return data

    def _to_classification(self, item: VerdictSchema, index: int) -> Classification:
        """Coerce model output onto the known labels."""
        category = item.category if item.category in CATEGORIES else FALLBACK_LABEL
        if category != item.category:
            logger.warning(f"Invalid category '{item.category}' for transaction {index}, using '{category}'")

        txn_type = item.type if item.type in TYPES else FALLBACK_LABEL
        if txn_type != item.type:
            logger.warning(f"Invalid type '{item.type}' for transaction {index}, using '{txn_type}'")

        confidence = self.default_confidence if item.confidence is None else int(round(item.confidence))

        return Classification(
            index=index,
            category=category,
            type=txn_type,
            merchant=item.merchant or "",
            confidence=confidence,
            note=item.note or ""
        )

    def _build_classification_prompt(self, transactions: Sequence[ParsedTransaction]) -> str:
        """Build batch classification prompt."""
        transaction_list = "\n".join(
            f'{i}. Date: {txn.date.isoformat()}, Description: "{txn.description}", Amount: {txn.amount}'
            for i, txn in enumerate(transactions, 1)
        )

        return f"""You are a financial expert AI. Analyze and classify the following transactions.

Transactions:
{transaction_list}

For each transaction, respond with a JSON array where each object has these fields:
- index: Transaction number from the list
- category: One of {json.dumps(CATEGORIES)}
- type: One of {json.dumps(TYPES)}
- merchant: Extract merchant name if available, otherwise ""
- confidence: Number between 0-100
- note: Brief AI insight (1-2 sentences)

Respond with ONLY a valid JSON array, no other text.

Example format:
[
  {{"index": 1, "category": "Food", "type": "Want", "merchant": "Zomato", "confidence": 95, "note": "Food delivery - discretionary spending"}}
]

Classify all transactions:"""

    def _build_description_prompt(
        self,
        transactions: Sequence[ParsedTransaction],
        examples: Sequence[Preference]
    ) -> str:
        """Build batch description prompt, seeded with user preferences."""
        transaction_list = "\n".join(
            f'{i}. Full Text: "{txn.description}", Amount: {txn.amount}'
            for i, txn in enumerate(transactions, 1)
        )

        preferences_text = ""
        if examples:
            lines = []
            for example in examples:
                line = f'- "{example.merchant}" -> "{example.description}" (Category: {example.category}, Type: {example.type})'
                if example.tags:
                    line += f", Tags: {', '.join(example.tags)}"
                lines.append(line)
            preferences_text = "\n\nUser's preferences (follow these patterns when similar):\n" + "\n".join(lines)

        return f"""You are a financial assistant specializing in transaction analysis. Generate natural, descriptive transaction descriptions for personal finance tracking.

Transactions to describe:
{transaction_list}{preferences_text}

For each transaction, create a concise description (max 50 characters) that:
1. Clearly identifies WHO the money went to (person name, business, app, service, etc.)
2. Describes WHAT was purchased/transferred
3. Uses natural language like "Payment to [name]" or "Purchased on [app]"

Respond with ONLY a valid JSON array where each object has "index" and "description" fields, no other text.

Example format:
[
  {{"index": 1, "description": "Payment to Tanmay"}},
  {{"index": 2, "description": "Course on Udemy"}}
]

Generate descriptions for all transactions:"""

    def _build_single_prompt(self, transaction_text: str) -> str:
        """Build single-transaction classification prompt."""
        return f"""You are a financial expert AI. Analyze the following transaction description and classify it.

Transaction: "{transaction_text}"

Respond with a JSON object (and ONLY JSON, no other text) with these fields:
- category: One of {json.dumps(CATEGORIES)}
- type: One of {json.dumps(TYPES)}
- merchant: Extract merchant name if available, otherwise ""
- confidence: Number between 0-100 indicating confidence in classification
- note: A brief insight (2-3 sentences) about this transaction in simple language

Example response format:
{{"category": "Food", "type": "Want", "merchant": "Zomato", "confidence": 95, "note": "Food delivery classified as discretionary Want."}}

Classify the transaction above:"""

    def _build_summary_prompt(self, report: AnalyticsReport) -> str:
        """Build financial summary prompt from aggregated totals."""
        groups = {group.key: str(group.total) for group in report.groups}
        types = {share.type: str(share.total) for share in report.types}
        count = sum(share.count for share in report.types)

        return f"""You are a personal finance advisor. Based on the following transaction summary, generate a brief but insightful financial summary (3-4 sentences).

Transaction Summary:
- Total Spending: ₹{report.total_amount:.2f}
- By {report.group_by.capitalize()}: {json.dumps(groups)}
- By Type: {json.dumps(types)}
- Total Transactions: {count}

Include:
1. Overall spending pattern observation
2. Main spending categories
3. One actionable suggestion for better spending habits

Keep the tone encouraging and practical. Respond with ONLY the summary text, no JSON or markup."""
