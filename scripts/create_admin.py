# scripts/create_admin.py

import asyncio
import logging
from typing import Optional

import typer
from sqlmodel.ext.asyncio.session import AsyncSession

from fam.core.database import create_db_and_tables, get_async_session_context
from fam.domains.usr import crud as usr_crud
from fam.domains.usr import models as usr_models
from fam.domains.usr import schemas as usr_schemas

logger = logging.getLogger(__name__)

ADMIN_ROLE_CODE = "ADMIN"

cli = typer.Typer()


async def ensure_admin_role(db: AsyncSession) -> usr_models.Role:
    """
    ADMIN 시스템 역할을 조회하고, 없으면 생성합니다.
    """
    db_role = await usr_crud.role.get_by_code(db, code=ADMIN_ROLE_CODE)
    if db_role is None:
        role_in = usr_schemas.RoleCreate(
            code=ADMIN_ROLE_CODE,
            name="Administrator",
            description="System administrator",
            rank=0,
            is_system_role=True,
        )
        db_role = await usr_crud.role.create(db, obj_in=role_in)
        logger.info("Created system role %s (id=%s)", ADMIN_ROLE_CODE, db_role.id)
    return db_role


async def create_admin_user(db: AsyncSession, user_in: usr_schemas.UserCreate) -> Optional[usr_models.User]:
    """
    데이터베이스에 관리자 사용자를 생성하는 비동기 함수.
    이메일이나 사용자명이 이미 있으면 아무것도 만들지 않고 None 을 반환합니다.
    """
    db_user_by_email = await usr_crud.user.get_by_email(db, email=user_in.email)
    if db_user_by_email:
        print(f"오류: 이미 존재하는 이메일입니다: {user_in.email}")
        return None

    db_user_by_username = await usr_crud.user.get_by_username(db, username=user_in.username)
    if db_user_by_username:
        print(f"오류: 이미 존재하는 사용자명입니다: {user_in.username}")
        return None

    admin_role = await ensure_admin_role(db)
    user_in = user_in.model_copy(update={"role_id": admin_role.id})
    db_user = await usr_crud.user.create(db, obj_in=user_in)
    print(f"관리자 계정이 성공적으로 생성되었습니다: {user_in.email} ({user_in.username})")
    return db_user


@cli.command()
def main(
    email: str = typer.Option(
        ..., '--email', '-e',
        prompt="관리자 이메일을 입력하세요",
        help="생성할 관리자 계정의 이메일 주소입니다."
    ),
    username: str = typer.Option(
        ..., '--username', '-u',
        prompt="관리자 사용자명(ID)을 입력하세요",
        help="로그인 시 사용할 사용자명(ID)입니다."
    ),
    password: str = typer.Option(
        ..., '--password', '-p',
        prompt="관리자 비밀번호를 입력하세요",
        hide_input=True,
        confirmation_prompt=True,
        help="생성할 관리자 계정의 비밀번호입니다. (최소 8자 이상)"
    ),
    full_name: str = typer.Option(
        "Admin", '--name', '-n',
        prompt="관리자 이름을 입력하세요",
        help="관리자의 이름입니다."
    ),
):
    """
    FAM 애플리케이션을 위한 새로운 관리자 계정(ADMIN 역할)을 생성합니다.
    """
    if len(password) < 8:
        print("오류: 비밀번호는 최소 8자 이상이어야 합니다.")
        raise typer.Abort()

    print("관리자 계정 생성을 시작합니다...")
    user_data = usr_schemas.UserCreate(
        email=email,
        username=username,
        password=password,
        full_name=full_name,
    )

    async def run_creation():
        await create_db_and_tables()
        async with get_async_session_context() as db:
            await create_admin_user(db=db, user_in=user_data)

    asyncio.run(run_creation())


if __name__ == "__main__":
    cli()
