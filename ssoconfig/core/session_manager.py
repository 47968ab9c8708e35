"""
SSOConfig - SSO session management for the shared credentials config file.

Read, edit, write and notify for SSO session sections.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from ssoconfig.core.profile_file import ProfileFile, ProfileFileError
from ssoconfig.core.profile_watcher import ProfileWatcher
from ssoconfig.core.section_editor import (
    SSO_SESSION_SECTION_NAME,
    Section,
    delete_section,
    iter_sections,
    session_name_from_connection_id,
    upsert_section,
)


@dataclass
class EditResult:
    """Outcome of a single edit of the config file."""

    success: bool
    changed: bool
    path: Path
    message: str = ""
    error: Optional[str] = None
    removed_lines: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "changed": self.changed,
            "path": str(self.path),
            "message": self.message,
            "error": self.error,
            "removed_lines": self.removed_lines,
        }


class SsoSessionManager:
    """
    Manages SSO session sections in the profile config file.

    Responsibilities:
    - Removing an sso-session and its dependent role profile
    - Writing sso-session sections
    - Listing the sections currently in the file
    - Notifying the watcher after every successful write

    The file is the single source of truth and is re-read for every request.
    Calls against the same file are expected to be serialized by the caller.
    """

    def __init__(
        self,
        profile_file: ProfileFile,
        watcher: Optional[ProfileWatcher] = None,
        logger: Optional[logging.Logger] = None,
        notify: bool = True,
    ):
        """
        Initialize the session manager.

        Args:
            profile_file: Access to the config file
            watcher: Receives a refresh after each write
            logger: Logger instance
            notify: Whether to signal the watcher after writes
        """
        self.profile_file = profile_file
        self.watcher = watcher or ProfileWatcher()
        self.logger = logger or logging.getLogger("ssoconfig.session_manager")
        self.notify = notify

    @property
    def path(self) -> Path:
        return self.profile_file.path

    def _apply(
        self,
        edit: Callable[[List[str]], List[str]],
        description: str,
        count_removed: bool = False,
    ) -> EditResult:
        try:
            lines = self.profile_file.read_lines()
        except ProfileFileError as e:
            self.logger.error(f"Aborting {description}: {str(e)}")
            return EditResult(
                success=False,
                changed=False,
                path=self.path,
                message=f"Could not read {self.path}",
                error=str(e),
            )

        updated = edit(lines)
        if updated == lines:
            self.logger.debug(f"{description}: nothing to change in {self.path}")
            return EditResult(success=True, changed=False, path=self.path, message="No changes needed")

        try:
            self.profile_file.write_lines(updated)
        except ProfileFileError as e:
            self.logger.error(f"Failed to save {description}: {str(e)}")
            return EditResult(
                success=False,
                changed=False,
                path=self.path,
                message=f"Could not write {self.path}",
                error=str(e),
            )

        self._refresh()
        return EditResult(
            success=True,
            changed=True,
            path=self.path,
            message=f"Updated {self.path}",
            removed_lines=max(len(lines) - len(updated), 0) if count_removed else 0,
        )

    def _refresh(self) -> None:
        if not self.notify:
            return
        try:
            self.watcher.force_refresh(self.path)
        except Exception as e:
            self.logger.warning(f"Config change notification failed: {str(e)}")

    def delete_sso_connection(self, session_name: str) -> EditResult:
        """
        Delete an sso-session section and its first dependent profile.

        Args:
            session_name: Name of the sso-session section

        Returns:
            EditResult; a missing session is a successful no-op
        """
        if not session_name:
            raise ValueError("session_name must not be empty")

        self.logger.info(f"Deleting sso-session '{session_name}' from {self.path}")
        result = self._apply(
            lambda lines: delete_section(session_name, lines),
            f"deletion of sso-session '{session_name}'",
            count_removed=True,
        )
        if result.success and not result.changed:
            result.message = f"sso-session '{session_name}' not found"
        elif result.changed:
            result.message = f"Removed sso-session '{session_name}' from {self.path}"
        return result

    def delete_sso_connection_by_id(self, connection_id: str) -> EditResult:
        """Delete the session referenced by a bearer connection id (``sso-session:<name>``)."""
        return self.delete_sso_connection(session_name_from_connection_id(connection_id))

    def update_sso_session(
        self,
        session_name: str,
        start_url: str,
        region: str,
        scopes: Iterable[str] = (),
    ) -> EditResult:
        """
        Create or replace an sso-session section.

        Args:
            session_name: Name of the sso-session section
            start_url: SSO start URL
            region: SSO region
            scopes: Registration scopes, written comma-separated

        Returns:
            EditResult

        Raises:
            ValueError: If the name is empty or any value spans lines
        """
        if not session_name:
            raise ValueError("session_name must not be empty")

        properties = {
            "sso_start_url": start_url,
            "sso_region": region,
            "sso_registration_scopes": ",".join(scopes),
        }
        for key, value in [("session_name", session_name)] + list(properties.items()):
            if "\n" in value or "\r" in value:
                raise ValueError(f"{key} must not contain line breaks")
        self.logger.info(f"Writing sso-session '{session_name}' to {self.path}")
        result = self._apply(
            lambda lines: upsert_section(lines, SSO_SESSION_SECTION_NAME, session_name, properties),
            f"update of sso-session '{session_name}'",
        )
        if result.changed:
            result.message = f"Saved sso-session '{session_name}' to {self.path}"
        return result

    def list_sections(self, kind: Optional[str] = None) -> List[Section]:
        """
        List the sections in the config file.

        Args:
            kind: Only return sections of this kind

        Raises:
            ProfileFileError: If the file cannot be read
        """
        lines = self.profile_file.read_lines()
        sections = list(iter_sections(lines))
        if kind is not None:
            sections = [section for section in sections if section.kind == kind]
        return sections

    def list_sso_sessions(self) -> List[str]:
        return [section.name for section in self.list_sections(SSO_SESSION_SECTION_NAME) if section.name]

    def dependent_profiles(self, session_name: str, sections: Optional[Sequence[Section]] = None) -> List[Section]:
        """Profiles named ``<session_name>-...``; only the first is removed on delete."""
        if sections is None:
            sections = self.list_sections("profile")
        prefix = f"{session_name}-"
        return [
            section for section in sections
            if section.kind == "profile" and section.name and section.name.startswith(prefix)
        ]
