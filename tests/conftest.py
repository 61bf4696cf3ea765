"""Shared pytest fixtures for the CodeRules test suite."""

from __future__ import annotations

import logging
import textwrap
from pathlib import Path

import pytest

from coderules.config.settings import CodeRulesSettings
from coderules.core.types import (
    ParsedBackendFile,
    ParsedFile,
    ProjectType,
    RuleCategory,
    RuleContext,
    Severity,
    Violation,
)
from coderules.scanner.file_discovery import classify, get_file_type
from coderules.scanner.import_graph import build_import_graph
from coderules.scanner.java_parser import parse_java_source
from coderules.scanner.typescript_parser import parse_typescript_source

PROJECT_ROOT = Path("/project")

# --------------------------------------------------------------------------- frontend samples

NAVIGATION_SAMPLE = textwrap.dedent("""\
    'use client';
    import { useRouter } from 'next/navigation';

    export function LogoutButton() {
      window.location.href = "/dashboard";
    }
""")

ANCHOR_IMAGE_SAMPLE = textwrap.dedent("""\
    import Link from 'next/link';

    export function Nav() {
      return (
        <nav>
          <a href="/settings">Settings</a>
          <a href="https://example.com">Docs</a>
          <img src="/logo.png" alt="logo" />
        </nav>
      );
    }
""")

ANY_TYPE_SAMPLE = textwrap.dedent("""\
    const label = "value: any";
    function parse(data: any): string[] {
      return data as any;
    }
    // data: any
""")

ENUM_SAMPLE = textwrap.dedent("""\
    'use client';
    import { Button } from '@/components/ui/button';

    export function RoleBadge({ role }: { role: UserRole }) {
      if (role === 'ADMIN_COMPANY') {
        return <Button>{UserStatus.ACTIVE}</Button>;
      }
      return null;
    }
""")

PAGINATION_SAMPLE = textwrap.dedent("""\
    import { apiClient } from '@/lib/utils/fetch-client';

    export async function loadUsers(page: number) {
      return apiClient.get(`/users?page=${page}&limit=10`);
    }
""")

BASE_TABLE_SAMPLE = textwrap.dedent("""\
    'use client';

    export function UserTable() {
      return <BaseTable columns={columns} data={[]} />;
    }
""")

PAGE_USE_CLIENT_SAMPLE = textwrap.dedent("""\
    'use client';

    import { useState } from 'react';

    export default function UsersPage() {
      const [count, setCount] = useState(0);
      return <div>{count}</div>;
    }
""")

CLIENT_FETCH_SAMPLE = textwrap.dedent("""\
    'use client';
    import axios from 'axios';

    export function Loader() {
      // fetch('/ignored')
      const a = fetch('/api/users');
      const b = axios.get('/api/teams');
      const token = localStorage.getItem('token');
      return <p>{user.email}</p>;
    }
""")

# --------------------------------------------------------------------------- backend samples

SERVICE_IMPL_SAMPLE = textwrap.dedent("""\
    package com.tamabee.api_hr.service.company;

    import org.springframework.stereotype.Service;
    import org.springframework.transaction.annotation.Transactional;

    @Service
    public class UserServiceImpl implements IUserService {

        @Transactional
        public UserResponse createUser(CreateUserRequest request) {
            return null;
        }

        public void deleteUser(Long id) {
            throw new RuntimeException("boom");
        }

        @Transactional
        public UserResponse getUser(Long id) {
            throw new NotFoundException("USER_NOT_FOUND");
        }

        public List<UserResponse> findAll() {
            return List.of();
        }
    }
""")

MAPPER_SAMPLE = textwrap.dedent("""\
    package com.tamabee.api_hr.mapper.company;

    public class UserMapper {

        public UserEntity toEntity(CreateUserRequest request) {
            if (request == null) {
                return null;
            }
            UserEntity entity = new UserEntity();
            return entity;
        }

        public UserResponse toResponse(UserEntity entity) {
            UserResponse response = new UserResponse();
            return response;
        }

        public void updateEntity(UserEntity entity, UpdateUserRequest request) {
            entity.setName(request.getName());
            if (request == null) {
                return;
            }
        }
    }
""")

ENTITY_SAMPLE = textwrap.dedent("""\
    package com.tamabee.api_hr.entity.company;

    import jakarta.persistence.Entity;

    @Entity
    @Table(name = "users")
    public class UserEntity {

        @Id
        private Long id;

        @ManyToOne
        private CompanyEntity company;

        private List<RoleEntity> roles;
    }
""")

CONTROLLER_SAMPLE = textwrap.dedent("""\
    package com.tamabee.api_hr.admin.controller;

    @RestController
    @RequestMapping("/api/admin/users")
    public class AdminUserController {

        @GetMapping
        @PreAuthorize("hasRole('ADMIN_COMPANY')")
        public ResponseEntity<BaseResponse<List<UserResponse>>> getUsers() {
            return ResponseEntity.ok(new BaseResponse<>(users));
        }

        @PostMapping
        public UserResponse createUser(@RequestBody CreateUserRequest request) {
            return null;
        }
    }
""")

REPOSITORY_SAMPLE = textwrap.dedent("""\
    package com.tamabee.api_hr.repository;

    public interface UserRepository extends JpaRepository<UserEntity, Long> {

        @Query("SELECT u FROM UserEntity u WHERE u.email = :email AND u.deleted = false")
        Optional<UserEntity> searchByEmail(String email);

        @Query("SELECT u FROM UserEntity u WHERE u.companyId = :companyId")
        List<UserEntity> listCompanyUsers(Long companyId);

        Optional<UserEntity> findByEmail(String email);

        List<UserEntity> fetchActive();
    }
""")

COMMENT_SAMPLE = textwrap.dedent("""\
    package com.tamabee.api_hr.core.util;

    /**
     * Validates: Requirements 3.1, 3.2
     */
    public class DateUtils {
        // This helper converts timestamps to the company time zone
        // Chuyển đổi thời gian sang múi giờ của công ty
        public static String format(Long value) {
            return "";
        }
    }
""")


# --------------------------------------------------------------------------- helpers

def parse_ts(relative_path: str, content: str, root: Path = PROJECT_ROOT) -> ParsedFile:
    info = classify(root / relative_path, relative_path, get_file_type(relative_path))
    return parse_typescript_source(info, content)


def parse_java(relative_path: str, content: str, root: Path = PROJECT_ROOT) -> ParsedBackendFile:
    info = classify(root / relative_path, relative_path, get_file_type(relative_path))
    return parse_java_source(info, content)


def context_for(files: list[ParsedFile], root: Path = PROJECT_ROOT) -> RuleContext:
    return RuleContext(
        project_root=root,
        all_files=[f.file for f in files],
        import_graph=build_import_graph(files),
    )


def make_violation(
    line: int,
    code_snippet: str,
    fix_code: str | None,
    source_path: Path | None = None,
    file: str = "src/sample.ts",
    end_line: int | None = None,
    severity: Severity = Severity.WARNING,
    project_type: ProjectType = ProjectType.FRONTEND,
    category: RuleCategory = RuleCategory.NAVIGATION,
    rule_id: str = "FE-NAV-001",
) -> Violation:
    return Violation(
        id=f"{rule_id}-{file}-{line}",
        rule_id=rule_id,
        rule_name="Sample rule",
        category=category,
        severity=severity,
        project_type=project_type,
        file=file,
        line=line,
        column=1,
        message="sample message",
        suggestion="sample suggestion",
        code_snippet=code_snippet,
        can_auto_fix=bool(fix_code),
        fix_code=fix_code,
        end_line=end_line,
        source_path=source_path,
    )


# --------------------------------------------------------------------------- fixtures

@pytest.fixture
def default_settings() -> CodeRulesSettings:
    return CodeRulesSettings()


@pytest.fixture
def tmp_frontend_project(tmp_path: Path) -> Path:
    """A small Next.js tree with one navigation error and a shared component."""
    root = tmp_path / "web"
    (root / "app" / "users").mkdir(parents=True)
    (root / "app" / "_components" / "_shared").mkdir(parents=True)
    (root / "node_modules" / "pkg").mkdir(parents=True)
    (root / "app" / "users" / "_logout.tsx").write_text(NAVIGATION_SAMPLE, encoding="utf-8")
    (root / "app" / "users" / "page.tsx").write_text(textwrap.dedent("""\
        import { Card } from '../_components/_shared/_card';

        export default function Page() {
          return <Card />;
        }
    """), encoding="utf-8")
    (root / "app" / "_components" / "_shared" / "_card.tsx").write_text(textwrap.dedent("""\
        export function Card() {
          return <div className="card" />;
        }
    """), encoding="utf-8")
    (root / "app" / "users" / "page.test.tsx").write_text("const x: any = 1;\n", encoding="utf-8")
    (root / "node_modules" / "pkg" / "index.ts").write_text("const y: any = 1;\n", encoding="utf-8")
    return root


@pytest.fixture
def tmp_backend_project(tmp_path: Path) -> Path:
    root = tmp_path / "api"
    service_dir = root / "com" / "tamabee" / "api_hr" / "service" / "company"
    service_dir.mkdir(parents=True)
    (service_dir / "UserServiceImpl.java").write_text(SERVICE_IMPL_SAMPLE, encoding="utf-8")
    test_dir = root / "test"
    test_dir.mkdir()
    (test_dir / "UserServiceTest.java").write_text(SERVICE_IMPL_SAMPLE, encoding="utf-8")
    return root


@pytest.fixture
def coderules_caplog(caplog, monkeypatch):
    """caplog that still sees ``coderules.*`` records after the CLI set up its RichHandler."""
    monkeypatch.setattr(logging.getLogger("coderules"), "propagate", True)
    return caplog
