"""
Album Service Business Logic

Sync orchestrator for the coral tracker. Owns the session state machine and
the presentation state (album map, selection, loading flag, error message,
profile) and keeps the album map in step with the store.

Uses dependency injection for testability:
- Auth client, storage client and repository are injected
- The backend session is created by the caller and released at sign-out

Mutation policy: apply locally, then persist. A failed persist surfaces an
error but does not roll the local state back.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from .date_normalizer import extract_capture_date, to_iso_string
from .models import (
    AlbumsMap,
    AuthUser,
    Photo,
    PhotoUpload,
    ReconciliationReport,
    SessionStatus,
    TimelineEntry,
    UserProfile,
)
from .photo_builder import build_photo_record, build_storage_path
from .protocols import (
    AlbumRepositoryProtocol,
    AlbumServiceError,
    AuthClientProtocol,
    AuthError,
    DuplicateAlbumError,
    StorageClientProtocol,
)
from .session import BackendSession
from .timeline import build_timeline, sort_photos_by_date

logger = logging.getLogger(__name__)

DUPLICATE_ALBUM_MESSAGE = "An album with this name already exists"

StateListener = Callable[["AlbumService"], None]


# ==================== Album Service ====================

class AlbumService:
    """
    Album sync orchestrator

    State machine over ``status``:
        SIGNED_OUT -> SIGNING_IN -> SIGNED_IN -> SIGNING_OUT -> SIGNED_OUT
        SIGNED_OUT -> SIGNING_UP -> SIGNED_IN
    """

    def __init__(
        self,
        auth: AuthClientProtocol,
        storage: StorageClientProtocol,
        repository: AlbumRepositoryProtocol,
        session: Optional[BackendSession] = None,
    ):
        """
        Initialize service with injected dependencies.

        Args:
            auth: Auth collaborator
            storage: Binary storage collaborator
            repository: Album store adapter
            session: Backend session shared with the storage/document clients
        """
        self.auth = auth
        self.storage = storage
        self.repo = repository
        self.session = session or BackendSession()

        # Presentation state
        self.status = SessionStatus.SIGNED_OUT
        self.user: Optional[AuthUser] = None
        self.albums: AlbumsMap = {}
        self.selected_album: Optional[str] = None
        self.loading = False
        self.error: Optional[str] = None
        self.profile: Optional[UserProfile] = None

        self._listeners: List[StateListener] = []
        self._unsubscribe_auth = self.auth.on_auth_state_changed(self._handle_auth_state)

    # ==================== State Plumbing ====================

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a presentation listener called after every state change"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"State listener failed: {e}")

    def _set_status(self, status: SessionStatus) -> None:
        logger.debug(f"Session status {self.status.value} -> {status.value}")
        self.status = status
        self._notify()

    def _fail(self, message: str) -> None:
        self.error = message
        self._notify()

    def _clear_session_state(self) -> None:
        self.user = None
        self.albums = {}
        self.selected_album = None
        self.profile = None
        self.loading = False
        self.session.close()

    def _handle_auth_state(self, user: Optional[AuthUser]) -> None:
        """Auth collaborator listener: a signed-out user wipes local state"""
        if user is None and self.user is not None:
            logger.info("Auth state cleared, dropping local album state")
            self._clear_session_state()
            self._set_status(SessionStatus.SIGNED_OUT)

    def _require_user(self) -> AuthUser:
        if self.user is None or self.status != SessionStatus.SIGNED_IN:
            raise AuthError("User must be authenticated")
        return self.user

    async def close(self) -> None:
        """Detach from the auth collaborator"""
        self._unsubscribe_auth()

    # ==================== Session Lifecycle ====================

    async def sign_in(self, email: str, password: str) -> bool:
        """
        Sign in, then load albums and profile

        Returns:
            bool: True if the session is signed in
        """
        if self.status != SessionStatus.SIGNED_OUT:
            logger.warning(f"sign_in ignored in state {self.status.value}")
            return False

        self.loading = True
        self.error = None
        self._set_status(SessionStatus.SIGNING_IN)
        try:
            user = await self.auth.sign_in(email, password)
        except AlbumServiceError as e:
            logger.error(f"Login failed: {e}")
            self.loading = False
            self.error = str(e)
            self._set_status(SessionStatus.SIGNED_OUT)
            return False

        await self._enter_signed_in(user)
        return True

    async def sign_up(self, email: str, password: str, first_name: str) -> bool:
        """
        Create an account with a profile and an empty album map

        Returns:
            bool: True if the session is signed in
        """
        if self.status != SessionStatus.SIGNED_OUT:
            logger.warning(f"sign_up ignored in state {self.status.value}")
            return False

        self.loading = True
        self.error = None
        self._set_status(SessionStatus.SIGNING_UP)
        try:
            user = await self.auth.sign_up(email, password)
            self.session.open(user)
            profile = UserProfile(
                first_name=first_name,
                email=email,
                created_at=to_iso_string(datetime.now(timezone.utc)),
            )
            self.profile = await self.repo.save_profile(user.user_id, profile)
            self.albums = await self.repo.save_albums(user.user_id, {})
        except AlbumServiceError as e:
            logger.error(f"Sign up failed: {e}")
            self._clear_session_state()
            self.error = str(e)
            self._set_status(SessionStatus.SIGNED_OUT)
            return False

        self.user = user
        self.loading = False
        self._set_status(SessionStatus.SIGNED_IN)
        logger.info(f"Account created for user {user.user_id}")
        return True

    async def _enter_signed_in(self, user: AuthUser) -> None:
        """Load the album map and profile; a failed load leaves the map empty"""
        self.user = user
        self.session.open(user)
        self.albums = {}
        self.selected_album = None
        self._set_status(SessionStatus.SIGNED_IN)

        try:
            self.albums = await self.repo.load_albums(user.user_id)
        except AlbumServiceError as e:
            logger.error(f"Error loading albums: {e}")
            self.albums = {}
            self.error = str(e)

        try:
            self.profile = await self.repo.get_profile(user.user_id)
        except AlbumServiceError as e:
            logger.error(f"Error loading user profile: {e}")
            self.error = self.error or str(e)

        self.loading = False
        self._notify()

    async def sign_out(self) -> bool:
        """Sign out and clear every piece of session state"""
        if self.status != SessionStatus.SIGNED_IN:
            return False

        self._set_status(SessionStatus.SIGNING_OUT)
        try:
            await self.auth.sign_out()
        except AlbumServiceError as e:
            logger.error(f"Error signing out: {e}")
            self.error = "Error signing out"
            self._set_status(SessionStatus.SIGNED_IN)
            return False

        self._clear_session_state()
        self.error = None
        if self.status != SessionStatus.SIGNED_OUT:
            self._set_status(SessionStatus.SIGNED_OUT)
        return True

    # ==================== Navigation ====================

    def select_album(self, album_name: str) -> bool:
        if album_name not in self.albums:
            logger.warning(f"Cannot select unknown album: {album_name}")
            return False
        self.selected_album = album_name
        self._notify()
        return True

    def back_to_albums(self) -> None:
        self.selected_album = None
        self._notify()

    def timeline(self, album_name: Optional[str] = None) -> List[TimelineEntry]:
        """Date-ordered photos of an album with day gaps"""
        name = album_name or self.selected_album
        if not name:
            return []
        return build_timeline(self.albums.get(name, []))

    # ==================== Album Operations ====================

    async def _persist(self, albums: AlbumsMap) -> bool:
        """Persist the map; on success the stored (cleaned) map becomes local state"""
        user = self._require_user()
        try:
            self.albums = await self.repo.save_albums(user.user_id, albums)
            return True
        except AlbumServiceError as e:
            logger.error(f"Error saving albums: {e}")
            self._fail(str(e))
            return False

    async def create_album(self, album_name: Optional[str]) -> bool:
        """
        Create an empty album

        Blank names are ignored; a duplicate name sets the error and makes no
        persistence call.
        """
        if not album_name or not album_name.strip():
            return False

        try:
            self._require_user()
            if album_name in self.albums:
                raise DuplicateAlbumError(DUPLICATE_ALBUM_MESSAGE)
        except AlbumServiceError as e:
            logger.warning(f"Album not created: {e}")
            self._fail(str(e))
            return False

        self.error = None
        self.albums = {**self.albums, album_name: []}
        self._notify()

        saved = await self._persist(self.albums)
        if saved:
            logger.info(f"Album created: {album_name}")
        self._notify()
        return saved

    async def _process_file(
        self, upload: PhotoUpload, user: AuthUser, album_name: str, timestamp_ms: int
    ) -> Optional[Photo]:
        """Upload one file and build its record; None on any failure"""
        try:
            path = build_storage_path(user.user_id, album_name, upload.filename, timestamp_ms)
            stored = await self.storage.upload(upload.data, path, upload.content_type)
            date = extract_capture_date(upload)
            return build_photo_record(
                stored.url, date, upload, user_id=user.user_id, storage_path=stored.path
            )
        except Exception as e:
            logger.error(f"Error processing file {upload.filename}: {e}")
            return None

    async def upload_photos(
        self,
        files: Sequence[PhotoUpload],
        album_name: Optional[str] = None,
    ) -> List[Photo]:
        """
        Upload files concurrently into an album

        Failed files are skipped; the album is re-sorted by date and persisted.

        Returns:
            List[Photo]: Records of the files that were uploaded
        """
        target = album_name or self.selected_album
        if not target or not files:
            return []

        try:
            user = self._require_user()
        except AuthError as e:
            self._fail(str(e))
            return []

        self.loading = True
        self._notify()
        # One millisecond per file keeps same-named files in a batch on distinct paths
        batch_ms = int(datetime.now(timezone.utc).timestamp() * 1000)
        try:
            results = await asyncio.gather(
                *(
                    self._process_file(upload, user, target, batch_ms + i)
                    for i, upload in enumerate(files)
                )
            )
            new_photos = [photo for photo in results if photo is not None]

            failed = len(files) - len(new_photos)
            if failed:
                logger.warning(f"{failed} of {len(files)} files failed to upload to {target}")

            if new_photos:
                merged = sort_photos_by_date([*self.albums.get(target, []), *new_photos])
                self.albums = {**self.albums, target: merged}
                self._notify()
                await self._persist(self.albums)

            return new_photos
        finally:
            self.loading = False
            self._notify()

    async def delete_photo(self, index: int, album_name: Optional[str] = None) -> bool:
        """
        Delete the photo at ``index`` of an album (storage object, then record)

        Nothing changes locally if the storage object could not be deleted.
        """
        target = album_name or self.selected_album
        photos = self.albums.get(target or "")
        if photos is None or not 0 <= index < len(photos):
            logger.warning(f"No photo {index} in album {target}")
            return False

        self.loading = True
        self._notify()
        try:
            user = self._require_user()
            photo = photos[index]
            await self.repo.delete_photo(user.user_id, target, photo)
        except AlbumServiceError as e:
            logger.error(f"Error deleting photo: {e}")
            self.loading = False
            self._fail(f"Failed to delete photo: {e}")
            return False

        remaining = photos[:index] + photos[index + 1:]
        self.albums = {**self.albums, target: remaining}
        self._notify()
        try:
            saved = await self._persist(self.albums)
            if saved:
                logger.info("Photo deleted successfully")
            return saved
        finally:
            self.loading = False
            self._notify()

    async def delete_album(self, album_name: str) -> bool:
        """Delete an album; the store returns the remaining map"""
        self.loading = True
        self._notify()
        try:
            user = self._require_user()
            self.albums = await self.repo.delete_album(user.user_id, album_name)
            if self.selected_album == album_name:
                self.selected_album = None
            return True
        except AlbumServiceError as e:
            logger.error(f"Error deleting album: {e}")
            self.error = "Failed to delete album"
            return False
        finally:
            self.loading = False
            self._notify()

    async def reload(self) -> bool:
        """Reload the album map from the store"""
        try:
            user = self._require_user()
            self.albums = await self.repo.load_albums(user.user_id)
            self._notify()
            return True
        except AlbumServiceError as e:
            logger.error(f"Error loading albums: {e}")
            self._fail(str(e))
            return False

    async def reconcile(self) -> Optional[ReconciliationReport]:
        """Repair interrupted photo deletes, then reload the album map"""
        try:
            user = self._require_user()
            report = await self.repo.reconcile(user.user_id)
        except AlbumServiceError as e:
            logger.error(f"Reconciliation failed: {e}")
            self._fail(str(e))
            return None

        if not report.clean:
            await self.reload()
        return report
