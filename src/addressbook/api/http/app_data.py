from dataclasses import dataclass

from src.addressbook.core.services import DbManageService, DbSessionService
from src.addressbook.runtime.config.config_data import ConfigData


@dataclass
class ApplicationDependencies:
    config: ConfigData
    database_service: DbSessionService
    db_manage_service: DbManageService
