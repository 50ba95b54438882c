# iis_deploy/core/validation_engine.py
"""Validation engine for deployment parameters"""

from typing import Any, Dict, List

from ..constants import (
    API_PARAM,
    BUILD_VERSION_PATTERN,
    NAME_PARAMS,
    PATH_SEGMENT_PATTERN,
    REQUIRED_PARAMS,
)
from ..models.request import parse_flag
from ..models.result import ValidationResult
from ..utils.version_utils import parse_version


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


class ValidationEngine:
    """Execute validation operations"""

    def missing_params(self, params: Dict[str, Any]) -> List[str]:
        """
        Collect the names of every missing required parameter

        Args:
            params: Parameters document

        Returns:
            Missing parameter names in declaration order
        """
        missing = [name for name in REQUIRED_PARAMS if _is_blank(params.get(name))]

        if not parse_flag(params.get("web_only")) and _is_blank(params.get(API_PARAM)):
            missing.append(API_PARAM)

        return missing

    def invalid_names(self, params: Dict[str, Any]) -> List[str]:
        """
        Collect the parameters that cannot be used as a path segment or pool name

        Args:
            params: Parameters document with every required field present

        Returns:
            Offending parameter names in declaration order
        """
        names = list(NAME_PARAMS)
        if not parse_flag(params.get("web_only")):
            names.append(API_PARAM)

        return [
            name for name in names
            if not self.validate_name(name, str(params[name]).strip()).is_valid
        ]

    def validate_params(self, params: Any) -> None:
        """
        Check that all required parameters are present and well-formed

        Args:
            params: Parameters document

        Raises:
            ValidationError: Listing every missing field, or every malformed name
        """
        from ..api.exceptions import ValidationError

        if not isinstance(params, dict):
            raise ValidationError(
                f"Parameters must be a JSON object, got {type(params).__name__}"
            )

        missing = self.missing_params(params)
        if missing:
            raise ValidationError.missing(missing)

        invalid = self.invalid_names(params)
        if invalid:
            raise ValidationError.malformed(invalid)

    def validate_request(self, request) -> None:
        """Re-check an already built DeploymentRequest"""
        self.validate_params(request.to_params())

    def validate_version(self, version: str) -> ValidationResult:
        """
        Validate release version tag

        Args:
            version: Version tag to validate

        Returns:
            ValidationResult
        """
        result = ValidationResult()

        if _is_blank(version):
            result.add_error("Version cannot be empty")
            return result

        if BUILD_VERSION_PATTERN.match(version):
            result.add_info(f"Build version: {version}")

            _, month, day, _ = parse_version(version).release
            if not 1 <= month <= 12:
                result.add_error(f"Invalid month in version: {month}")
            if not 1 <= day <= 31:
                result.add_error(f"Invalid day in version: {day}")

            if not version.startswith("v"):
                result.add_warning(
                    f"Version '{version}' has no 'v' prefix; release tags are usually v{version}"
                )
        else:
            result.add_warning(
                f"Non-standard version format: {version}. "
                "Build versions look like vYY.MM.DD.NNNN"
            )

        return result

    def validate_name(self, label: str, value: str) -> ValidationResult:
        """
        Validate a name used as a path segment or pool name

        Args:
            label: Parameter name for messages
            value: Value to check

        Returns:
            ValidationResult
        """
        result = ValidationResult()

        if _is_blank(value):
            result.add_error(f"{label} cannot be empty")
        elif not PATH_SEGMENT_PATTERN.match(value):
            result.add_error(
                f"Invalid {label}: '{value}'. Path separators and reserved characters are not allowed"
            )

        return result

    def check_params(self, params: Dict[str, Any]) -> ValidationResult:
        """
        Run all non-raising checks over a parameters document

        Args:
            params: Parameters document

        Returns:
            ValidationResult with every finding
        """
        result = ValidationResult()

        for name in self.missing_params(params):
            result.add_error(f"Missing required parameter: {name}")

        if not result.is_valid:
            return result

        result.merge(self.validate_version(str(params["ver_number"]).strip()))

        for name in NAME_PARAMS:
            result.merge(self.validate_name(name, str(params[name]).strip()))

        web_only = parse_flag(params.get("web_only"))
        if not web_only:
            result.merge(self.validate_name(API_PARAM, str(params[API_PARAM]).strip()))
        elif not _is_blank(params.get(API_PARAM)):
            result.add_warning("api_name is ignored for web-only deployments")

        if result.is_valid:
            result.add_info(f"Deploying {'web only' if web_only else 'web and API'}")

        return result
