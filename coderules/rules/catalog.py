"""Built-in rule set and the default registry factory."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from coderules.rules.backend.architecture_rules import (
    DomainBasedPackageRule,
    MapperComponentAnnotationRule,
    ServiceInterfacePatternRule,
)
from coderules.rules.backend.comment_rules import NoLabelAnnotationRule, NoRequirementCommentsRule, VietnameseCommentsRule
from coderules.rules.backend.entity_rules import ExtendBaseEntityRule, LongTypeForForeignKeyRule, NoRelationshipAnnotationsRule
from coderules.rules.backend.exception_rules import CustomExceptionRule, ErrorCodeEnumRule, ExceptionFactoryMethodRule
from coderules.rules.backend.mapper_rules import MapperNullCheckRule, RequiredMapperMethodsRule
from coderules.rules.backend.repository_rules import DeletedCheckFirstRule, SpringDataJpaNamingRule
from coderules.rules.backend.response_rules import BaseResponseMethodsRule, PageableParameterRule, ResponseEntityRule
from coderules.rules.backend.security_rules import AdminPackageRolesRule, CompanyPackageRolesRule, PreAuthorizeRequiredRule
from coderules.rules.backend.transaction_rules import TransactionalReadRule, TransactionalWriteRule
from coderules.rules.base_rule import BaseRule
from coderules.rules.frontend.api_call_rules import ApiClientRule, ApiServerRule, DirectFetchRule, PaginationConstantsRule
from coderules.rules.frontend.auth_rules import DirectLocalStorageRule, UseAuthHookRule
from coderules.rules.frontend.component_placement_rules import ComponentPlacementRule
from coderules.rules.frontend.component_rules import ComponentSizeRule, InternalComponentPrefixRule, PageUseClientRule
from coderules.rules.frontend.i18n_rules import HardcodedStringRule, UseTranslationsRule
from coderules.rules.frontend.navigation_rules import NavigationAnchorRule, NavigationHrefRule
from coderules.rules.frontend.performance_rules import NextImageRule, SuspenseBoundaryRule
from coderules.rules.frontend.statistics_card_rules import StatisticsCardColorRule, StatisticsCardIconRule
from coderules.rules.frontend.table_rules import BaseTableImportRule, TableSttColumnRule
from coderules.rules.frontend.type_rules import AnyTypeRule, EnumImportRule
from coderules.rules.registry import RuleRegistry

if TYPE_CHECKING:
    from coderules.config.settings import CodeRulesSettings

__all__ = ["frontend_rules", "backend_rules", "all_rules", "build_default_registry"]

logger = logging.getLogger(__name__)


def frontend_rules() -> list[BaseRule]:
    return [
        NavigationHrefRule(),
        NavigationAnchorRule(),
        ApiClientRule(),
        ApiServerRule(),
        DirectFetchRule(),
        PaginationConstantsRule(),
        UseAuthHookRule(),
        DirectLocalStorageRule(),
        ComponentPlacementRule(),
        ComponentSizeRule(),
        PageUseClientRule(),
        InternalComponentPrefixRule(),
        AnyTypeRule(),
        EnumImportRule(),
        TableSttColumnRule(),
        BaseTableImportRule(),
        StatisticsCardIconRule(),
        StatisticsCardColorRule(),
        NextImageRule(),
        SuspenseBoundaryRule(),
        HardcodedStringRule(),
        UseTranslationsRule(),
    ]


def backend_rules() -> list[BaseRule]:
    return [
        ServiceInterfacePatternRule(),
        MapperComponentAnnotationRule(),
        DomainBasedPackageRule(),
        VietnameseCommentsRule(),
        NoRequirementCommentsRule(),
        NoLabelAnnotationRule(),
        ExtendBaseEntityRule(),
        NoRelationshipAnnotationsRule(),
        LongTypeForForeignKeyRule(),
        ErrorCodeEnumRule(),
        CustomExceptionRule(),
        ExceptionFactoryMethodRule(),
        MapperNullCheckRule(),
        RequiredMapperMethodsRule(),
        DeletedCheckFirstRule(),
        SpringDataJpaNamingRule(),
        ResponseEntityRule(),
        BaseResponseMethodsRule(),
        PageableParameterRule(),
        PreAuthorizeRequiredRule(),
        AdminPackageRolesRule(),
        CompanyPackageRolesRule(),
        TransactionalWriteRule(),
        TransactionalReadRule(),
    ]


def all_rules() -> list[BaseRule]:
    return frontend_rules() + backend_rules()


def build_default_registry(settings: CodeRulesSettings | None = None) -> RuleRegistry:
    """Registry holding every built-in rule except those disabled in *settings*."""
    disabled = set(settings.rules.disabled) if settings is not None else set()
    unknown = disabled - {rule.rule_id for rule in all_rules()}
    if unknown:
        logger.warning("Unknown rule ids in disabled list: %s", ", ".join(sorted(unknown)))
    return RuleRegistry(rule for rule in all_rules() if rule.rule_id not in disabled)
