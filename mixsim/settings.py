from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # stiff integrator
    ode_method: str = "LSODA"
    ode_rtol: float = 1e-15
    ode_atol: float = 1e-21

    # Nelder-Mead
    fmin_xatol: float = 1e-4
    fmin_fatol: float = 1e-20
    fmin_maxiter: int = 200
    fmin_maxfev: int = 400

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="MIXSIM_")


settings = Settings()
