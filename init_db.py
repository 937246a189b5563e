# =============================================================================
# 🧩 init_db.py
# -----------------------------------------------------------------------------
# Initialisiert die Datenbank für QR Code Shine:
#   - Erstellt alle Tabellen (users, pricing_plans, subscriptions, qr_codes, qr_scans)
#   - Fügt die Standard-Tarifpläne ein (free, pro, enterprise)
#   - Optional: Admin-Benutzer (ADMIN_EMAIL in .env)
# =============================================================================

import os

import config  # noqa: F401  (lädt .env)
import models  # noqa: F401  (registriert alle Tabellen)
from database import Base, engine, SessionLocal
from models.user import User
from seeds.plans_seed import seed_plans


def ensure_admin(db, email: str) -> bool:
    """Legt den Admin an oder hebt einen bestehenden Benutzer auf role=admin."""
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        db.add(User(email=email, full_name="Admin User", plan="enterprise", role="admin"))
        db.commit()
        return True
    if user.role != "admin":
        user.role = "admin"
        db.commit()
    return False


def main() -> None:
    print("🛠️ Erstelle Tabellen in der Datenbank...")
    Base.metadata.create_all(bind=engine)
    print("✅ Tabellen wurden erfolgreich erstellt.\n")

    db = SessionLocal()
    try:
        print("📦 Füge Standard-Tarifpläne hinzu (falls nicht vorhanden)...")
        print(f"  ➕ {seed_plans(db)} Tarif(e) neu angelegt.")

        admin_email = os.getenv("ADMIN_EMAIL")
        if admin_email:
            print("👤 Prüfe auf Admin-Benutzer...")
            if ensure_admin(db, admin_email):
                print(f"  🆕 Admin-Benutzer erstellt: {admin_email}")
            else:
                print("  ✔️ Admin-Benutzer existiert bereits.")
    finally:
        db.close()

    print("\n🎉 Datenbankinitialisierung abgeschlossen!")


if __name__ == "__main__":
    main()
