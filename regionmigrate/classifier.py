from .defaults import LOG_PREFIX, OLD_PREFIX
from .models import Classification, FileStatus, LayoutEntry
from .utils import is_legacy_encoded_name, strip_old_prefix

class LayoutClassifier:
    """Decides what a top-level entry of the storage root is.

    Whether the new layout's root region already exists changes the verdict:
    with the new layout in place any old region directory is stale and
    unknown names are tolerated.
    """
    def __init__(self, new_layout_present: bool):
        self.new_layout_present = new_layout_present

    def classify(self, st: FileStatus) -> LayoutEntry:
        name = st.name
        if name.startswith(OLD_PREFIX):
            encoded = strip_old_prefix(name)
            if self.new_layout_present:
                message = f"Old region directory found: {name}"
            elif is_legacy_encoded_name(encoded):
                message = ""
            else:
                message = f"Old region format can not be upgraded: {name}"
            return LayoutEntry(st.path, name, st.is_dir, Classification.OLD_REGION,
                               encoded_name=encoded, message=message)

        if name.startswith(LOG_PREFIX):
            message = (f"Unrecovered region server log file {name} this file can "
                       "be recovered by the master when it starts.")
            return LayoutEntry(st.path, name, st.is_dir, Classification.LOG_FILE,
                               message=message)

        if not self.new_layout_present:
            return LayoutEntry(st.path, name, st.is_dir, Classification.UNRECOGNIZED,
                               message=f"Unrecognized file {name}")

        return LayoutEntry(st.path, name, st.is_dir, Classification.NORMAL)
