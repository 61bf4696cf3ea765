"""Tests for the backend (Java/Spring) rules."""
from __future__ import annotations
import textwrap
from coderules.core.types import ProjectType, Severity
from coderules.rules.backend.architecture_rules import (
    DomainBasedPackageRule, MapperComponentAnnotationRule, ServiceInterfacePatternRule,
)
from coderules.rules.backend.comment_rules import NoLabelAnnotationRule, NoRequirementCommentsRule, VietnameseCommentsRule
from coderules.rules.backend.entity_rules import ExtendBaseEntityRule, LongTypeForForeignKeyRule, NoRelationshipAnnotationsRule
from coderules.rules.backend.exception_rules import CustomExceptionRule, ErrorCodeEnumRule, ExceptionFactoryMethodRule
from coderules.rules.backend.mapper_rules import MapperNullCheckRule, RequiredMapperMethodsRule, is_mapper_method
from coderules.rules.backend.repository_rules import DeletedCheckFirstRule, SpringDataJpaNamingRule
from coderules.rules.backend.response_rules import BaseResponseMethodsRule, PageableParameterRule, ResponseEntityRule
from coderules.rules.backend.security_rules import AdminPackageRolesRule, CompanyPackageRolesRule, PreAuthorizeRequiredRule
from coderules.rules.backend.transaction_rules import (
    READ_ONLY_TRANSACTIONAL, TransactionalReadRule, TransactionalWriteRule, is_read_method, is_write_method,
)
from tests.conftest import (
    COMMENT_SAMPLE, CONTROLLER_SAMPLE, ENTITY_SAMPLE, MAPPER_SAMPLE, REPOSITORY_SAMPLE, SERVICE_IMPL_SAMPLE,
    context_for, parse_java, parse_ts,
)

SERVICE_PATH = "com/tamabee/api_hr/service/company/UserServiceImpl.java"
MAPPER_PATH = "com/tamabee/api_hr/mapper/company/UserMapper.java"
ENTITY_PATH = "com/tamabee/api_hr/entity/company/UserEntity.java"
CONTROLLER_PATH = "com/tamabee/api_hr/admin/controller/AdminUserController.java"
REPOSITORY_PATH = "com/tamabee/api_hr/repository/UserRepository.java"

COMPANY_CONTROLLER_SAMPLE = textwrap.dedent("""\
    package com.tamabee.api_hr.company.controller;

    @RestController
    public class CompanyUserController {

        @GetMapping("/users")
        @PreAuthorize("hasRole('ADMIN_TAMABEE')")
        public ResponseEntity<BaseResponse<Page<UserResponse>>> listUsers(Pageable pageable) {
            return ResponseEntity.ok(BaseResponse.success(users));
        }
    }
""")

MULTILINE_SIGNATURE_SAMPLE = textwrap.dedent("""\
    package com.tamabee.api_hr.admin.controller;

    @RestController
    @PreAuthorize("hasRole('ADMIN_TAMABEE')")
    public class AdminReportController {

        @RequestMapping(value = "/all", method = RequestMethod.GET)
        public ResponseEntity<BaseResponse<List<ReportResponse>>> all(
                @RequestParam String q) {
            return ResponseEntity.ok(BaseResponse.success(reports));
        }

        @GetMapping("/paged")
        public ResponseEntity<BaseResponse<List<ReportResponse>>> paged(
                @RequestParam String q, Pageable pageable) {
            return ResponseEntity.ok(BaseResponse.success(reports));
        }
    }
""")


def _check(rule, relative_path: str, content: str):
    pf = parse_java(relative_path, content)
    return rule.check(pf, context_for([pf]))


class TestBackendRuleBase:
    def test_typescript_files_are_ignored(self) -> None:
        pf = parse_ts("app/page.tsx", "throw new RuntimeException('x');\n")
        assert CustomExceptionRule().check(pf, context_for([pf])) == []

    def test_violations_are_backend(self) -> None:
        v = _check(CustomExceptionRule(), SERVICE_PATH, SERVICE_IMPL_SAMPLE)[0]
        assert v.project_type is ProjectType.BACKEND and v.file == SERVICE_PATH


class TestArchitectureRules:
    def test_impl_with_interface(self) -> None:
        assert _check(ServiceInterfacePatternRule(), SERVICE_PATH, SERVICE_IMPL_SAMPLE) == []

    def test_impl_without_interface(self) -> None:
        src = "package com.x.company.service;\npublic class UserServiceImpl {\n}\n"
        vs = _check(ServiceInterfacePatternRule(), "com/x/company/service/UserServiceImpl.java", src)
        assert len(vs) == 1 and vs[0].message == "Service class UserServiceImpl does not implement interface IUserService"

    def test_plain_service_class(self) -> None:
        src = "package com.x.company.service;\n@Service\npublic class UserService {\n}\n"
        vs = _check(ServiceInterfacePatternRule(), "com/x/company/service/UserService.java", src)
        assert len(vs) == 1 and vs[0].line == 3 and "naming convention" in vs[0].message

    def test_service_interface_itself(self) -> None:
        src = "package com.x.company.service;\npublic interface IUserService {\n}\n"
        assert _check(ServiceInterfacePatternRule(), "com/x/company/service/IUserService.java", src) == []

    def test_mapper_without_component(self) -> None:
        vs = _check(MapperComponentAnnotationRule(), MAPPER_PATH, MAPPER_SAMPLE)
        assert len(vs) == 1 and vs[0].line == 3 and vs[0].can_auto_fix
        assert vs[0].fix_code == "@Component\npublic class UserMapper {"

    def test_mapper_with_component(self) -> None:
        src = "package com.x.mapper;\n\n@Component\npublic class UserMapper {\n}\n"
        assert _check(MapperComponentAnnotationRule(), "com/x/mapper/UserMapper.java", src) == []

    def test_package_without_domain(self) -> None:
        src = "package com.tamabee.api_hr.service;\npublic class UserServiceImpl implements IUserService {\n}\n"
        vs = _check(DomainBasedPackageRule(), "com/tamabee/api_hr/service/UserServiceImpl.java", src)
        assert len(vs) == 1 and vs[0].line == 1
        assert vs[0].message == "Package com.tamabee.api_hr.service does not follow domain-based structure"

    def test_package_with_domain(self) -> None:
        assert _check(DomainBasedPackageRule(), SERVICE_PATH, SERVICE_IMPL_SAMPLE) == []


class TestCommentRules:
    def test_english_comments(self) -> None:
        vs = _check(VietnameseCommentsRule(), "com/tamabee/api_hr/core/util/DateUtils.java", COMMENT_SAMPLE)
        assert sorted(v.line for v in vs) == [3, 7] and all(v.severity is Severity.INFO for v in vs)

    def test_short_and_marker_comments_skipped(self) -> None:
        src = "class A {\n    // short one\n    // TODO: translate this comment into the right language later\n}\n"
        assert _check(VietnameseCommentsRule(), "A.java", src) == []

    def test_requirement_comment_spans_block(self) -> None:
        vs = _check(NoRequirementCommentsRule(), "com/tamabee/api_hr/core/util/DateUtils.java", COMMENT_SAMPLE)
        assert len(vs) == 1 and vs[0].line == 3 and vs[0].end_line == 5 and not vs[0].can_auto_fix

    def test_label_in_test_file(self) -> None:
        src = 'class UserPropertyTest {\n    @Label("creates user") @Property\n    void creates() {}\n}\n'
        vs = _check(NoLabelAnnotationRule(), "src/test/java/UserPropertyTest.java", src)
        assert len(vs) == 1 and vs[0].line == 2 and vs[0].fix_code == "@Property"

    def test_label_outside_tests(self) -> None:
        assert _check(NoLabelAnnotationRule(), "src/main/java/A.java", '@Label("x")\nclass A {}\n') == []


class TestEntityRules:
    def test_missing_base_entity(self) -> None:
        vs = _check(ExtendBaseEntityRule(), ENTITY_PATH, ENTITY_SAMPLE)
        assert len(vs) == 1 and vs[0].line == 7 and vs[0].message == "Entity class UserEntity does not extend BaseEntity"

    def test_extends_base_entity(self) -> None:
        src = "package com.x.entity;\n@Entity\npublic class UserEntity extends BaseEntity {\n}\n"
        assert _check(ExtendBaseEntityRule(), "com/x/entity/UserEntity.java", src) == []

    def test_relationship_annotation(self) -> None:
        vs = _check(NoRelationshipAnnotationsRule(), ENTITY_PATH, ENTITY_SAMPLE)
        assert [(v.line, v.message) for v in vs] == [(12, "Field company uses @ManyToOne annotation")]

    def test_entity_references(self) -> None:
        vs = _check(LongTypeForForeignKeyRule(), ENTITY_PATH, ENTITY_SAMPLE)
        assert [(v.line, v.message) for v in vs] == [
            (13, "Field company uses entity reference CompanyEntity"),
            (15, "Field roles uses collection of entity references"),
        ]


class TestExceptionRules:
    def test_hardcoded_error_code(self) -> None:
        vs = _check(ErrorCodeEnumRule(), SERVICE_PATH, SERVICE_IMPL_SAMPLE)
        assert [(v.line, v.message) for v in vs] == [(20, 'Hardcoded error code "USER_NOT_FOUND" in exception')]

    def test_generic_exception(self) -> None:
        vs = _check(CustomExceptionRule(), SERVICE_PATH, SERVICE_IMPL_SAMPLE)
        assert [(v.line, v.message) for v in vs] == [(15, "Using generic exception RuntimeException")]
        assert vs[0].column == 9

    def test_constructor_instead_of_factory(self) -> None:
        vs = _check(ExceptionFactoryMethodRule(), SERVICE_PATH, SERVICE_IMPL_SAMPLE)
        assert [(v.line, v.severity) for v in vs] == [(20, Severity.INFO)]

    def test_factory_method_and_error_code_enum(self) -> None:
        src = "class A {\n  void a() {\n    throw NotFoundException.user(id);\n"
        src += "    throw new BadRequestException(ErrorCode.INVALID);\n  }\n}\n"
        assert _check(ErrorCodeEnumRule(), "A.java", src) == []
        assert _check(CustomExceptionRule(), "A.java", src) == []


class TestMapperRules:
    def test_null_checks(self) -> None:
        vs = _check(MapperNullCheckRule(), MAPPER_PATH, MAPPER_SAMPLE)
        assert [(v.line, v.message) for v in vs] == [
            (13, "Mapper method toResponse missing null check"),
            (18, "Mapper method updateEntity has null check but not at the beginning of method"),
        ]

    def test_first_statement_skips_comments(self) -> None:
        src = textwrap.dedent("""\
            public class UserMapper {
                public UserResponse toResponse(UserEntity entity) {
                    // guard
                    if (entity == null) {
                        return null;
                    }
                    return new UserResponse();
                }
            }
        """)
        assert _check(MapperNullCheckRule(), "com/x/mapper/UserMapper.java", src) == []

    def test_required_methods_present(self) -> None:
        assert _check(RequiredMapperMethodsRule(), MAPPER_PATH, MAPPER_SAMPLE) == []

    def test_required_methods_missing(self) -> None:
        src = "public class UserMapper {\n    public UserResponse toResponseList(UserEntity e) {\n    }\n}\n"
        vs = _check(RequiredMapperMethodsRule(), "com/x/mapper/UserMapper.java", src)
        assert [v.message for v in vs] == [
            "Mapper class UserMapper missing method toEntity()",
            "Mapper class UserMapper missing method updateEntity()",
        ]

    def test_is_mapper_method(self) -> None:
        assert is_mapper_method("toEntity") and is_mapper_method("mapRow") and is_mapper_method("convertAll")
        assert not is_mapper_method("total") and not is_mapper_method("build")


class TestRepositoryRules:
    def test_deleted_check(self) -> None:
        vs = _check(DeletedCheckFirstRule(), REPOSITORY_PATH, REPOSITORY_SAMPLE)
        assert [(v.line, v.message) for v in vs] == [
            (5, "deleted = false check is not at the beginning of WHERE clause"),
            (8, "Query missing deleted = false check"),
        ]
        assert vs[0].severity is Severity.ERROR and vs[0].column == 5

    def test_deleted_first_passes(self) -> None:
        src = 'interface R {\n    @Query(value = "SELECT u FROM U u WHERE u.deleted = false AND u.id = :id")\n    U one(Long id);\n}\n'
        assert _check(DeletedCheckFirstRule(), "com/x/repository/R.java", src) == []

    def test_query_without_where(self) -> None:
        src = 'interface R {\n    @Query("SELECT u FROM U u")\n    List<U> every();\n}\n'
        assert _check(DeletedCheckFirstRule(), "com/x/repository/R.java", src) == []

    def test_naming_convention(self) -> None:
        vs = _check(SpringDataJpaNamingRule(), REPOSITORY_PATH, REPOSITORY_SAMPLE)
        assert [(v.line, v.message) for v in vs] == [
            (13, "Repository method fetchActive does not follow Spring Data JPA naming convention"),
        ]

    def test_default_methods_skipped(self) -> None:
        src = "public interface R extends JpaRepository<U, Long> {\n    List<U> findAll();\n    U save(U u);\n}\n"
        assert _check(SpringDataJpaNamingRule(), "com/x/repository/R.java", src) == []


class TestResponseRules:
    def test_plain_return_type(self) -> None:
        vs = _check(ResponseEntityRule(), CONTROLLER_PATH, CONTROLLER_SAMPLE)
        assert [(v.line, v.message) for v in vs] == [(14, "Method createUser does not return ResponseEntity")]
        assert vs[0].suggestion == "Change return type to ResponseEntity<BaseResponse<UserResponse>>"

    def test_response_entity_without_base_response(self) -> None:
        src = "class AController {\n    @GetMapping\n    public ResponseEntity<String> ping() {\n    }\n}\n"
        vs = _check(ResponseEntityRule(), "com/x/controller/AController.java", src)
        assert len(vs) == 1 and "not wrapped in BaseResponse" in vs[0].message

    def test_base_response_constructor(self) -> None:
        vs = _check(BaseResponseMethodsRule(), CONTROLLER_PATH, CONTROLLER_SAMPLE)
        assert [v.line for v in vs] == [10]

    def test_list_without_pageable(self) -> None:
        vs = _check(PageableParameterRule(), CONTROLLER_PATH, CONTROLLER_SAMPLE)
        assert [(v.line, v.message) for v in vs] == [(9, "List API getUsers missing Pageable parameter")]

    def test_multiline_signature(self) -> None:
        vs = _check(PageableParameterRule(), "com/tamabee/api_hr/admin/controller/AdminReportController.java",
                    MULTILINE_SIGNATURE_SAMPLE)
        assert [(v.line, v.message) for v in vs] == [(8, "List API all missing Pageable parameter")]

    def test_page_with_pageable(self) -> None:
        path = "com/tamabee/api_hr/company/controller/CompanyUserController.java"
        assert _check(PageableParameterRule(), path, COMPANY_CONTROLLER_SAMPLE) == []


class TestSecurityRules:
    def test_missing_pre_authorize(self) -> None:
        vs = _check(PreAuthorizeRequiredRule(), CONTROLLER_PATH, CONTROLLER_SAMPLE)
        assert [(v.line, v.message) for v in vs] == [(14, "Controller method createUser missing @PreAuthorize annotation")]

    def test_class_level_pre_authorize(self) -> None:
        path = "com/tamabee/api_hr/admin/controller/AdminReportController.java"
        assert _check(PreAuthorizeRequiredRule(), path, MULTILINE_SIGNATURE_SAMPLE) == []

    def test_public_controllers_skipped(self) -> None:
        src = "package com.x.core.controller;\npublic class AuthController {\n    @PostMapping\n    public R login() {\n    }\n}\n"
        assert _check(PreAuthorizeRequiredRule(), "com/x/core/controller/AuthController.java", src) == []

    def test_admin_package_role(self) -> None:
        vs = _check(AdminPackageRolesRule(), CONTROLLER_PATH, CONTROLLER_SAMPLE)
        assert len(vs) == 1 and vs[0].line == 9
        assert vs[0].code_snippet == "@PreAuthorize(hasRole('ADMIN_COMPANY'))"

    def test_company_package_roles(self) -> None:
        path = "com/tamabee/api_hr/company/controller/CompanyUserController.java"
        vs = _check(CompanyPackageRolesRule(), path, COMPANY_CONTROLLER_SAMPLE)
        assert [v.message for v in vs] == [
            "Company API listUsers missing ADMIN_COMPANY or MANAGER_COMPANY role",
            "Company API listUsers has invalid TAMABEE role",
        ]
        assert all(v.line == 8 for v in vs)


class TestTransactionRules:
    def test_method_classification(self) -> None:
        assert is_write_method("createUser") and is_write_method("softDeleteUser")
        assert is_read_method("getUser") and is_read_method("isActive") and is_read_method("hasAccess")
        assert not is_read_method("updateUser") and not is_read_method("island")

    def test_write_method_missing_annotation(self) -> None:
        vs = _check(TransactionalWriteRule(), SERVICE_PATH, SERVICE_IMPL_SAMPLE)
        assert len(vs) == 1
        v = vs[0]
        assert v.line == 14 and v.message == "Write method deleteUser missing @Transactional annotation"
        assert v.can_auto_fix and v.fix_code == "    @Transactional\n    public void deleteUser(Long id) {"

    def test_write_method_read_only(self) -> None:
        src = "public class AServiceImpl {\n    @Transactional(readOnly = true)\n    public void saveA() {\n    }\n}\n"
        vs = _check(TransactionalWriteRule(), "com/x/service/AServiceImpl.java", src)
        assert len(vs) == 1 and not vs[0].can_auto_fix and vs[0].code_snippet == READ_ONLY_TRANSACTIONAL

    def test_read_methods(self) -> None:
        vs = _check(TransactionalReadRule(), SERVICE_PATH, SERVICE_IMPL_SAMPLE)
        assert [(v.line, v.code_snippet, v.fix_code) for v in vs] == [
            (18, "@Transactional", READ_ONLY_TRANSACTIONAL),
            (23, "List<UserResponse> findAll(...)",
             "    @Transactional(readOnly = true)\n    public List<UserResponse> findAll() {"),
        ]

    def test_read_method_with_other_parameters(self) -> None:
        src = textwrap.dedent("""\
            public class AServiceImpl {
                @Transactional(propagation = Propagation.REQUIRED)
                public A getA() {
                }
            }
        """)
        vs = _check(TransactionalReadRule(), "com/x/service/AServiceImpl.java", src)
        assert len(vs) == 1 and vs[0].line == 2 and not vs[0].can_auto_fix

    def test_interfaces_skipped(self) -> None:
        src = "public interface IUserService {\n    void deleteUser(Long id);\n    User getUser(Long id);\n}\n"
        path = "com/x/service/IUserService.java"
        assert _check(TransactionalWriteRule(), path, src) == [] and _check(TransactionalReadRule(), path, src) == []

    def test_non_service_files_skipped(self) -> None:
        assert _check(TransactionalWriteRule(), MAPPER_PATH, MAPPER_SAMPLE) == []
