"""Profile name to owner serial resolution."""


class ProfileRegistry:
    """Map profile names to the stable serial numbers written as row owners."""

    def __init__(self, serials, my_profile):
        self.serials = {}
        for name, serial in (serials or {}).items():
            key = str(name or "").strip()
            if key:
                self.serials[key] = int(serial)
        self.my_profile = str(my_profile or "").strip()

    def serial_for_profile(self, profile):
        """Return the serial of ``profile``; -1 when the profile is unknown."""
        return self.serials.get(str(profile or "").strip(), -1)

    def my_serial(self):
        return self.serial_for_profile(self.my_profile)


def parse_profile_serials(text):
    """Parse ``name:serial,name:serial`` into a dict, skipping malformed pairs."""
    serials = {}
    for chunk in str(text or "").split(","):
        if ":" not in chunk:
            continue
        name, raw = chunk.split(":", 1)
        name = name.strip()
        try:
            serial = int(raw.strip())
        except ValueError:
            continue
        if name:
            serials[name] = serial
    return serials
